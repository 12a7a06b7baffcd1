from __future__ import annotations
from stock_ingest.models import StockRecord


def test_semicolon_csv(parser):
    result = parser.parse_file(b"SKU;Quantity\nA;2\nB;3\n", "eu.csv")
    assert result.metadata.delimiter == ";"
    assert [r.sku for r in result.data] == ["A", "B"]


def test_tsv(parser):
    result = parser.parse_file(b"SKU\tQty\tPrice\nA\t3\t9.99\n", "export.tsv")
    assert result.metadata.file_format == "tsv"
    assert result.metadata.delimiter == "\t"
    assert result.data == [StockRecord("A", 3, price=9.99)]


def test_pipe_delimited_txt(parser):
    result = parser.parse_file(b"sku|qty\nA|5\n", "dump.txt")
    assert result.metadata.file_format == "txt"
    assert result.metadata.delimiter == "|"
    assert result.data == [StockRecord("A", 5)]


def test_unknown_extension_uses_plain_text(parser):
    result = parser.parse_file(b"sku qty\nA 5\n", "stock.foo")
    assert result.metadata.file_format == "unknown"
    assert result.metadata.delimiter == " "
    assert result.data == [StockRecord("A", 5)]


def test_unknown_extension_with_comma_content(parser):
    result = parser.parse_file(b"Product SKU,Stock Level\nA-1,5\nB-2,3\n", "export.foo")
    assert result.success
    assert result.metadata.file_format == "unknown"
    assert result.metadata.delimiter == ","
    assert result.metadata.detected_columns == {"sku": "Product SKU", "currentStock": "Stock Level"}
    assert result.data == [StockRecord("A-1", 5), StockRecord("B-2", 3)]


def test_bom_csv(parser):
    result = parser.parse_file(b"\xef\xbb\xbfSKU,Quantity\nA,1\n", "bom.csv")
    assert result.metadata.encoding == "utf-8-bom"
    assert result.metadata.detected_columns["sku"] == "SKU"
    assert result.success


def test_latin1_csv(parser):
    payload = "sku,name,qty\nA,Café crème,3\nB,Pâté maison,4\n".encode("latin-1")
    result = parser.parse_file(payload, "legacy.csv")
    assert result.success
    assert result.metadata.encoding not in ("utf-8", "utf-8-bom")
    assert result.data[0].name.startswith("Caf")


def test_ragged_csv_falls_back_to_manual_parse(parser):
    result = parser.parse_file(b"sku,qty\nA,1,oops\nB,2\n", "ragged.csv")
    assert [r.sku for r in result.data] == ["A", "B"]


def test_excel_workbook(parser, make_xlsx):
    payload = make_xlsx({
        "ReadMe": [["generated by export tool"]],
        "Stock": [["SKU", "Quantity", "Price"], [12345, 5, 2.5], ["B-2", 0, None]],
    })
    result = parser.parse_file(payload, "inventory.xlsx")
    assert result.metadata.file_format == "excel"
    assert result.metadata.encoding == "binary"
    assert result.metadata.delimiter is None
    assert result.data == [StockRecord("12345", 5, price=2.5), StockRecord("B-2", 0)]


def test_excel_header_only(parser, make_xlsx):
    result = parser.parse_file(make_xlsx({"Sheet1": [["SKU", "Quantity"]]}), "empty.xlsx")
    assert result.errors == ["No data rows found in file"]


def test_corrupt_excel(parser):
    result = parser.parse_file(b"not a workbook", "broken.xlsx")
    assert not result.success
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Parsing failed: Excel parsing failed:")
    assert result.metadata.file_format == "excel"
    assert result.metadata.total_rows == 0
    assert result.metadata.detected_platform == "generic"


def test_legacy_xls_is_read_as_excel(parser):
    result = parser.parse_file(b"\xD0\xCF\x11\xE0\xA1\xB1\x1A\xE1" + b"\0" * 512, "legacy.xls")
    assert not result.success
    assert result.metadata.file_format == "excel"
    assert result.errors[0].startswith("Parsing failed: Excel parsing failed:")
    assert "Install xlrd" not in result.errors[0]


def test_json_records(parser):
    payload = b'[{"sku": "a", "quantity": 2, "price": "3.50"}, {"sku": "b", "quantity": "x"}]'
    result = parser.parse_file(payload, "feed.json")
    assert result.metadata.file_format == "json"
    assert result.metadata.delimiter is None
    assert result.data == [StockRecord("A", 2, price=3.5)]
    assert result.metadata.skipped_rows == 1


def test_json_nested_values(parser):
    payload = b'[{"product": {"sku": "a"}, "stock": {"available": 7}}]'
    result = parser.parse_file(payload, "feed.json")
    assert result.metadata.detected_columns == {"sku": "product.sku", "currentStock": "stock.available"}
    assert result.data == [StockRecord("A", 7)]


def test_invalid_json(parser):
    result = parser.parse_file(b"{not json", "feed.json")
    assert not result.success
    assert result.errors[0].startswith("Parsing failed: JSON parsing failed:")
    assert result.metadata.encoding == "utf-8"


def test_json_scalar(parser):
    result = parser.parse_file(b"42", "feed.json")
    assert result.errors == ["Parsing failed: JSON parsing failed: JSON data must be an array or object"]


def test_xml_products(parser):
    payload = b"""<?xml version="1.0" encoding="UTF-8"?>
<catalog>
  <products>
    <product><sku>a-1</sku><stock>4</stock><name>Bolt</name></product>
    <product><sku>a-2</sku><stock>0</stock><name>Nut</name></product>
  </products>
</catalog>"""
    result = parser.parse_file(payload, "feed.xml")
    assert result.metadata.file_format == "xml"
    assert result.data == [StockRecord("A-1", 4, "Bolt"), StockRecord("A-2", 0, "Nut")]


def test_invalid_xml(parser):
    result = parser.parse_file(b"<items><item>", "feed.xml")
    assert result.errors[0].startswith("Parsing failed: XML parsing failed:")
