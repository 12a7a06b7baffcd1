from __future__ import annotations
from stock_ingest.readers.delimited import (
    PLAIN_TEXT_DELIMITERS,
    detect_delimiter,
    manual_delimited_parse,
    read_delimited,
    read_plain_text,
)


def test_detect_delimiter_candidates():
    assert detect_delimiter("a;b;c\n1;2;3\n") == ";"
    assert detect_delimiter("a|b\n1|2\n") == "|"
    assert detect_delimiter("a\tb\tc\n1\t2\t3\n") == "\t"
    assert detect_delimiter("a,b,c\n1,2,3\n") == ","


def test_detect_delimiter_defaults_to_comma():
    assert detect_delimiter("single\nvalue\n") == ","
    assert detect_delimiter("") == ","


def test_detect_delimiter_tie_keeps_comma():
    assert detect_delimiter("a,b;c\n1,2;3\n") == ","


def test_detect_delimiter_prefers_consistent_columns():
    # commas inside the name column make the comma count ragged
    text = "sku;name;qty\nA;Bolt, small, zinc;5\nB;Nut;6\n"
    assert detect_delimiter(text) == ";"


def test_detect_delimiter_sample_lines_limit():
    text = "a;b\n1;2\n" + "x,y,z,w,v\n" * 10
    assert detect_delimiter(text, sample_lines=2) == ";"


def test_read_delimited_semicolon():
    table = read_delimited("SKU;Qty\nA;1\n")
    assert table.headers == ["SKU", "Qty"]
    assert table.rows == [{"SKU": "A", "Qty": "1"}]
    assert table.delimiter == ";"


def test_read_delimited_quoted_cells_and_blank_lines():
    table = read_delimited('SKU,Quantity\n\nA,"1,234 pcs"\n\n')
    assert table.rows == [{"SKU": "A", "Quantity": "1,234 pcs"}]


def test_read_delimited_ragged_rows_fall_back_to_manual_parse():
    table = read_delimited("sku,qty\nA,1,extra\nB,2\n")
    assert table.headers == ["sku", "qty"]
    assert table.rows == [{"sku": "A", "qty": "1"}, {"sku": "B", "qty": "2"}]


def test_read_delimited_empty_text():
    table = read_delimited("   \n")
    assert table.headers == [] and table.rows == []


def test_manual_parse_strips_edge_quotes():
    table = manual_delimited_parse("\"sku\",\"qty\"\n'A','2'\n", ",")
    assert table.headers == ["sku", "qty"]
    assert table.rows == [{"sku": "A", "qty": "2"}]


def test_plain_text_candidates_include_space():
    assert detect_delimiter("sku qty name\nA 1 x\n", candidates=PLAIN_TEXT_DELIMITERS) == " "
    assert detect_delimiter("sku qty name\nA 1 x\n") == ","
    assert detect_delimiter("single\nline\n", candidates=PLAIN_TEXT_DELIMITERS) == ","


def test_read_plain_text_scores_all_sampled_lines():
    # The header alone has more spaces than commas
    table = read_plain_text("Product SKU,Stock Level\nA-1,5\nB-2,3\n")
    assert table.delimiter == ","
    assert table.headers == ["Product SKU", "Stock Level"]
    assert table.rows == [
        {"Product SKU": "A-1", "Stock Level": "5"},
        {"Product SKU": "B-2", "Stock Level": "3"},
    ]


def test_read_plain_text():
    table = read_plain_text("sku qty\nA 5\n")
    assert table.delimiter == " "
    assert table.rows == [{"sku": "A", "qty": "5"}]


def test_read_plain_text_needs_two_lines():
    assert len(read_plain_text("only a header line")) == 0
