from __future__ import annotations

import unittest

from rest_table.core.readers import (
    CsvArrayReader,
    CsvFieldReader,
    JsonArrayReader,
    JsonFieldReader,
    PayloadFormat,
    Row,
    XmlArrayReader,
    XmlFieldReader,
    split_path,
    strip_root,
)
from rest_table.core.readers.json_reader import normalize_jsonpath, query
from rest_table.core.readers.xml_reader import coerce_leaf


class PathHelperTests(unittest.TestCase):
    def test_strip_and_split(self) -> None:
        samples = [
            ("$.a.b", "a.b", ["a", "b"]),
            ("$", "", []),
            ("a..b", "a..b", ["a", "b"]),
            ("", "", []),
        ]
        for path, stripped, parts in samples:
            with self.subTest(path=path):
                self.assertEqual(strip_root(path), stripped)
                self.assertEqual(split_path(path), parts)

    def test_payload_format_from_content_type(self) -> None:
        samples = [
            ("text/csv; charset=utf-8", PayloadFormat.CSV),
            ("application/xml", PayloadFormat.XML),
            ("text/xml", PayloadFormat.XML),
            ("application/json", PayloadFormat.JSON),
            (None, PayloadFormat.JSON),
        ]
        for content_type, expected in samples:
            with self.subTest(content_type=content_type):
                self.assertIs(PayloadFormat.from_content_type(content_type), expected)


class JsonReaderTests(unittest.TestCase):
    def test_array_extraction(self) -> None:
        reader = JsonArrayReader()
        payload = '{"data": {"items": [{"id": 1}, {"id": 2}], "meta": {"total": 2}}}'

        self.assertEqual(reader.read(payload, "$.data.items"), [{"id": 1}, {"id": 2}])
        self.assertEqual(reader.read(payload, "data.meta"), [{"total": 2}])
        self.assertIsNone(reader.read(payload, "$.missing"))

    def test_malformed_json_yields_none(self) -> None:
        with self.assertLogs("rest_table.core.readers.json_reader", level="WARNING"):
            self.assertIsNone(JsonArrayReader().read("{not json", "$"))
        self.assertIsNone(JsonArrayReader().read("", "$"))

    def test_field_extraction(self) -> None:
        reader = JsonFieldReader({"id": 5, "tags": ["a", "b"], "dim": {"w": 2}})

        self.assertEqual(reader.read(0, "id"), 5)
        self.assertEqual(reader.read(0, "$.dim.w"), 2)
        self.assertEqual(reader.read(0, "$.tags[*]"), ["a", "b"])
        self.assertEqual(reader.read(0, "tags"), ["a", "b"])
        self.assertIsNone(reader.read(0, "missing"))

    def test_invalid_jsonpath_reads_as_null(self) -> None:
        reader = JsonFieldReader({"user id": 7, "id": 1})

        for path in ["user id", "$.["]:
            with self.subTest(path=path):
                self.assertIsNone(reader.read(0, path))
        self.assertEqual(reader.read(0, "id"), 1)
        self.assertIsNone(JsonArrayReader().read('{"items": []}', "items["))

    def test_wildcard_with_single_match_is_a_list(self) -> None:
        self.assertEqual(query({"tags": ["only"]}, "$.tags[*]"), ["only"])

    def test_normalize_jsonpath(self) -> None:
        self.assertEqual(normalize_jsonpath("a.b"), "$.a.b")
        self.assertEqual(normalize_jsonpath("$.a"), "$.a")
        self.assertEqual(normalize_jsonpath(""), "$")


class CsvReaderTests(unittest.TestCase):
    def test_header_rows_and_short_records(self) -> None:
        payload = " a , b ,c\n1, 2 ,3\n4,5\n"

        rows = CsvArrayReader().read(payload)

        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0], {"a": "1", "b": "2", "c": "3"})
        self.assertEqual(rows[1], {"a": "4", "b": "5", "c": None})
        self.assertEqual(list(rows[0]), ["a", "b", "c"])

    def test_blank_lines_and_extra_values(self) -> None:
        rows = CsvArrayReader().read("a,b\n\n1,2,3\n")
        self.assertEqual(rows, [{"a": "1", "b": "2"}])

    def test_quoted_values(self) -> None:
        rows = CsvArrayReader().read('name,city\n"Smith, J","New York"\n')
        self.assertEqual(rows, [{"name": "Smith, J", "city": "New York"}])

    def test_malformed_csv_yields_empty(self) -> None:
        with self.assertLogs("rest_table.core.readers.csv_reader", level="WARNING"):
            self.assertEqual(CsvArrayReader().read('a,b\n"1,2\n'), [])
        self.assertEqual(CsvArrayReader().read(""), [])

    def test_field_reader_by_index(self) -> None:
        reader = CsvFieldReader([{"a": "1"}, {"a": "2"}])

        self.assertEqual(reader.read(1, "a"), "2")
        self.assertIsNone(reader.read(0, "b"))
        self.assertIsNone(reader.read(5, "a"))
        self.assertEqual(Row(reader).read(0, "a"), "1")


class XmlReaderTests(unittest.TestCase):
    def test_repeated_tags_become_arrays_in_document_order(self) -> None:
        payload = (
            "<root><order><item>a</item><item>b</item><item>c</item></order></root>"
        )

        rows = XmlArrayReader().read(payload, "root.order")

        self.assertEqual(rows, [{"item": ["a", "b", "c"]}])

    def test_single_tag_is_never_wrapped(self) -> None:
        payload = (
            "<root>"
            "<order><item>a</item></order>"
            "<order><item><sku>X1</sku><qty>2</qty></item></order>"
            "</root>"
        )

        rows = XmlArrayReader().read(payload, "order")

        self.assertEqual(rows[0], {"item": "a"})
        self.assertEqual(rows[1], {"item": {"sku": "X1", "qty": 2}})

    def test_leaf_coercion_precedence(self) -> None:
        samples = [
            ("42", 42, int),
            ("9999999999", 9999999999, int),
            ("3.14", 3.14, float),
            ("abc", "abc", str),
        ]
        for text, expected, kind in samples:
            with self.subTest(text=text):
                rows = XmlArrayReader().read(f"<r><i><v>{text}</v></i></r>", "i")
                self.assertEqual(rows[0]["v"], expected)
                self.assertIsInstance(rows[0]["v"], kind)

    def test_coerce_leaf_edges(self) -> None:
        self.assertEqual(coerce_leaf("-7"), -7)
        self.assertIsInstance(coerce_leaf("99999999999999999999"), float)
        self.assertEqual(coerce_leaf("1e3"), 1000.0)
        self.assertEqual(coerce_leaf(""), "")
        self.assertEqual(coerce_leaf("12abc"), "12abc")

    def test_tag_groups_keep_first_seen_order(self) -> None:
        payload = "<r><i><b>1</b><a>x</a><b>2</b></i></r>"

        row = XmlArrayReader().read(payload, "i")[0]

        self.assertEqual(list(row), ["b", "a"])
        self.assertEqual(row["b"], [1, 2])

    def test_empty_path_and_root_only_path_use_root_children(self) -> None:
        payload = "<items><item><id>1</id></item><item><id>2</id></item></items>"
        for path in ["", "$", "items"]:
            with self.subTest(path=path):
                rows = XmlArrayReader().read(payload, path)
                self.assertEqual(rows, [{"id": 1}, {"id": 2}])

    def test_intermediate_segments_follow_first_match_only(self) -> None:
        # Known limitation: the second <group> is never visited.
        payload = (
            "<root>"
            "<group><item><id>1</id></item></group>"
            "<group><item><id>2</id></item></group>"
            "</root>"
        )

        rows = XmlArrayReader().read(payload, "$.root.group.item")

        self.assertEqual(rows, [{"id": 1}])

    def test_no_match_yields_empty(self) -> None:
        self.assertEqual(XmlArrayReader().read("<r><a>1</a></r>", "r.b"), [])

    def test_namespaced_tags_match_by_local_name(self) -> None:
        payload = '<r xmlns="urn:x"><i><v>1</v></i></r>'
        self.assertEqual(XmlArrayReader().read(payload, "i"), [{"v": 1}])

    def test_malformed_xml_yields_none(self) -> None:
        with self.assertLogs("rest_table.core.readers.xml_reader", level="WARNING"):
            self.assertIsNone(XmlArrayReader().read("<r><unclosed></r>", "r"))

    def test_field_reader_walks_nested_rows(self) -> None:
        reader = XmlFieldReader({"id": 1, "dim": {"w": 3.5}, "tag": ["a", "b"]})

        self.assertEqual(reader.read(0, "$.dim.w"), 3.5)
        self.assertEqual(reader.read(0, "tag"), ["a", "b"])
        self.assertIsNone(reader.read(0, "id.x"))
        self.assertIsNone(reader.read(0, "missing"))


if __name__ == "__main__":
    unittest.main()
