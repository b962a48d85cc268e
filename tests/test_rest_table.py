from __future__ import annotations

import json
import unittest

from rest_table import RestTable
from rest_table.core.config import ParameterConfig, RequestConfig, ServiceConfig, TableConfig
from rest_table.core.contracts import HttpRequest
from rest_table.core.errors import ConfigError, TransportError, UnanswerableQueryError
from rest_table.core.expressions import E
from rest_table.core.fields import Direction


class FakeTransport:
    """Returns queued payloads; queued exceptions are raised instead."""

    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.requests: list[HttpRequest] = []

    def execute(self, request: HttpRequest) -> str:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _page(*ids: int) -> str:
    return json.dumps(
        {"total": 99, "items": [{"id": i, "name": f"user{i}"} for i in ids]}
    )


URL = (
    "/employees?offset={{ offset }}&limit={{ limit }}"
    "{% if dept is defined %}&dept={{ dept }}{% endif %}"
    "{% if projects is defined %}&fields={{ projects | join(',') }}{% endif %}"
    "{% if filters_dnf is defined %}"
    "{% for f in filters_dnf | single_group %}&{{ f.name }}{{ f.operator }}{{ f.value }}{% endfor %}"
    "{% endif %}"
)

TABLE = TableConfig(
    name="employees",
    array_path="$.items",
    parameters=(
        ParameterConfig("id", Direction.RESPONSE, "int", "$.id"),
        ParameterConfig("name", Direction.RESPONSE, "string"),
        ParameterConfig("dept", Direction.REQUEST, "string"),
        ParameterConfig("total", Direction.RESPONSE, "long"),
    ),
)


def _request(**overrides) -> RequestConfig:
    settings = dict(
        addresses="http://a.local, http://b.local",
        url=URL,
        page_size=2,
        filter_field_mappings={"id": "employee_id"},
    )
    settings.update(overrides)
    return RequestConfig(**settings)


class RestTableScanTests(unittest.TestCase):
    def test_pages_until_short_page(self) -> None:
        transport = FakeTransport(_page(1, 2), _page(3, 4), _page(5))
        table = RestTable(TABLE, _request(), transport=transport)

        rows = list(table.scan(projection=[0, 3]))

        self.assertEqual(rows, [(1, 99), (2, 99), (3, 99), (4, 99), (5, 99)])
        self.assertEqual(
            [request.url for request in transport.requests],
            [
                "http://a.local/employees?offset=0&limit=2&fields=employee_id,total",
                "http://a.local/employees?offset=2&limit=2&fields=employee_id,total",
                "http://a.local/employees?offset=4&limit=2&fields=employee_id,total",
            ],
        )

    def test_full_last_page_ends_on_empty_page(self) -> None:
        transport = FakeTransport(_page(1, 2), _page())
        table = RestTable(TABLE, _request(), transport=transport)

        self.assertEqual(len(list(table.scan())), 2)
        self.assertEqual(len(transport.requests), 2)

    def test_zero_page_size_fetches_once(self) -> None:
        transport = FakeTransport(_page(1, 2, 3))
        table = RestTable(TABLE, _request(page_size=0), transport=transport)

        self.assertEqual([row[0] for row in table.scan()], [1, 2, 3])
        self.assertEqual(len(transport.requests), 1)

    def test_failover_uses_next_address_for_all_pages(self) -> None:
        transport = FakeTransport(TransportError("down"), _page(1, 2), _page(3))
        table = RestTable(TABLE, _request(), transport=transport)

        with self.assertLogs("rest_table.table", level="WARNING"):
            rows = list(table.scan(projection=[0]))

        self.assertEqual(rows, [(1,), (2,), (3,)])
        hosts = [request.url.split("/employees")[0] for request in transport.requests]
        self.assertEqual(hosts, ["http://a.local", "http://b.local", "http://b.local"])

    def test_all_addresses_failing_raises(self) -> None:
        transport = FakeTransport(TransportError("down"), TransportError("timeout"))
        table = RestTable(TABLE, _request(), transport=transport)

        with self.assertLogs("rest_table.table", level="WARNING"):
            with self.assertRaises(TransportError) as caught:
                table.scan()
        message = str(caught.exception)
        self.assertIn("http://a.local: down", message)
        self.assertIn("http://b.local: timeout", message)

    def test_request_only_equality_is_bound_into_rows_and_url(self) -> None:
        transport = FakeTransport(_page(1))
        table = RestTable(TABLE, _request(), transport=transport)

        rows = list(table.scan(filters=[E.eq(E.col(2), E.lit("sales"))], projection=[0, 2]))

        self.assertEqual(rows, [(1, "sales")])
        self.assertIn("&dept=sales", transport.requests[0].url)
        self.assertTrue(transport.requests[0].url.endswith("&dept=sales"))

    def test_filters_are_pushed_with_name_mapping(self) -> None:
        transport = FakeTransport(_page(5))
        table = RestTable(TABLE, _request(), transport=transport)

        list(table.scan(filters=[E.ge(E.col(0), E.lit(5))]))

        self.assertTrue(transport.requests[0].url.endswith("&employee_id>=5"))

    def test_disjunction_with_column_comparison_is_not_pushed(self) -> None:
        transport = FakeTransport(_page(1))
        table = RestTable(TABLE, _request(), transport=transport)
        expression = E.or_(E.eq(E.col(0), E.lit(1)), E.eq(E.col(3), E.col(0)))

        list(table.scan(filters=[expression], projection=[0]))

        self.assertEqual(
            transport.requests[0].url,
            "http://a.local/employees?offset=0&limit=2&fields=employee_id",
        )

    def test_unanswerable_filter_aborts_before_any_request(self) -> None:
        transport = FakeTransport(_page(1))
        table = RestTable(TABLE, _request(), transport=transport)

        with self.assertRaises(UnanswerableQueryError):
            table.scan(filters=[E.gt(E.col(2), E.lit("a"))])
        self.assertEqual(transport.requests, [])

    def test_each_scan_has_its_own_bound_values(self) -> None:
        transport = FakeTransport(_page(1), _page(2))
        table = RestTable(TABLE, _request(), transport=transport)

        first = table.scan(filters=[E.eq(E.col(2), E.lit("sales"))], projection=[2])
        second = table.scan(projection=[2])

        self.assertEqual(list(first), [("sales",)])
        self.assertEqual(list(second), [(None,)])
        self.assertNotIn("dept=", transport.requests[1].url)

    def test_content_type_resolution(self) -> None:
        table = RestTable(TABLE, _request(), transport=FakeTransport())
        csv_table = RestTable(
            TABLE, _request(default_content_type="text/csv"), transport=FakeTransport()
        )

        self.assertEqual(table.content_type({}), "application/json")
        self.assertEqual(table.content_type({"contentType": "text/xml"}), "text/xml")
        self.assertEqual(csv_table.content_type({"contentType": "text/xml"}), "text/csv")

    def test_csv_response(self) -> None:
        transport = FakeTransport("id,name\n1,Ann\n2,Bob\n")
        table = RestTable(
            TABLE,
            _request(page_size=0, default_content_type="text/csv"),
            transport=transport,
        )

        self.assertEqual(list(table.scan(projection=[1, 0])), [("Ann", 1), ("Bob", 2)])

    def test_xml_response_from_properties(self) -> None:
        xml_table = TableConfig(
            name="books",
            array_path="catalog.book",
            parameters=(
                ParameterConfig("id", Direction.RESPONSE, "int"),
                ParameterConfig("title", Direction.RESPONSE, "string"),
            ),
        )
        payload = (
            "<catalog><book><id>1</id><title>Dune</title></book>"
            "<book><id>2</id><title>Emma</title></book></catalog>"
        )
        table = RestTable(
            xml_table,
            _request(page_size=0),
            transport=FakeTransport(payload),
            properties={"contentType": "application/xml"},
        )

        self.assertEqual(list(table.scan()), [(1, "Dune"), (2, "Emma")])

    def test_table_without_parameters_has_no_rows(self) -> None:
        table = RestTable(
            TableConfig(name="empty"), _request(), transport=FakeTransport(_page(1, 2))
        )

        self.assertEqual(list(table.scan()), [])

    def test_missing_request_config_raises(self) -> None:
        with self.assertRaises(ConfigError):
            RestTable(TABLE, transport=FakeTransport())

    def test_from_service_inherits_service_request(self) -> None:
        service = ServiceConfig(request=_request(page_size=0), tables=(TABLE,))
        transport = FakeTransport(_page(7))

        table = RestTable.from_service(service, "employees", transport=transport)

        self.assertEqual([row[0] for row in table.scan()], [7])


if __name__ == "__main__":
    unittest.main()
