"""Scan a paginated JSON endpoint served by an in-memory transport."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from urllib.parse import parse_qs, urlparse

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "rest_table").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from rest_table import E, RequestConfig, RestTable, TableConfig
from rest_table.core.config import ParameterConfig
from rest_table.core.contracts import HttpRequest
from rest_table.core.fields import Direction

EMPLOYEES = [
    {"id": i, "name": f"employee-{i}", "age": 20 + i, "hired": f"2020-01-{i:02d}"}
    for i in range(1, 8)
]


class InMemoryEmployees:
    """Answers `/employees?offset=..&limit=..&min_age=..` like a real API."""

    def execute(self, request: HttpRequest) -> str:
        print(request.method, request.url)
        query = {key: values[0] for key, values in parse_qs(urlparse(request.url).query).items()}
        offset = int(query.get("offset", 0))
        limit = int(query.get("limit", len(EMPLOYEES)))
        min_age = int(query.get("min_age", 0))
        matching = [item for item in EMPLOYEES if item["age"] >= min_age]
        return json.dumps({"source": "memory", "items": matching[offset : offset + limit]})


def main() -> None:
    # 1) Describe the endpoint.
    table = TableConfig(
        name="employees",
        array_path="$.items",
        parameters=(
            ParameterConfig("id", Direction.RESPONSE, "int"),
            ParameterConfig("name", Direction.RESPONSE, "string"),
            ParameterConfig("age", Direction.BOTH, "int"),
            ParameterConfig("hired", Direction.RESPONSE, "date"),
            ParameterConfig("source", Direction.RESPONSE, "string"),
        ),
    )
    request = RequestConfig(
        addresses="http://memory.local",
        url=(
            "/employees?offset={{ offset }}&limit={{ limit }}"
            "{% for f in filters_dnf | single_group %}&{{ f.name }}={{ f.value }}{% endfor %}"
        ),
        page_size=3,
        filter_field_mappings={"age": "min_age"},
    )

    # 2) Scan with a pushed-down filter and a projection.
    with RestTable(table, request, transport=InMemoryEmployees()) as employees:
        for row in employees.scan(filters=[E.ge(E.col(2), E.lit(23))], projection=[1, 3, 4]):
            print(row)


if __name__ == "__main__":
    main()
