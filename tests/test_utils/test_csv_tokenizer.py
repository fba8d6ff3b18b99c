"""
Unit tests for the CSV tokenizer.
"""

import pytest
from src.utils.csv_tokenizer import escape_cell, format_row, rows_to_csv, tokenize


def test_empty_input():
    """Empty text yields no rows."""
    assert tokenize("") == []


def test_simple_rows():
    assert tokenize("a,b\nc,d") == [["a", "b"], ["c", "d"]]


def test_crlf_equivalent_to_lf():
    """CRLF is consumed as a single line terminator."""
    assert tokenize("a,b\r\nc,d") == tokenize("a,b\nc,d")


def test_bare_cr_ends_row():
    assert tokenize("a\rb") == [["a"], ["b"]]


def test_trailing_newline_does_not_add_row():
    assert tokenize("a,b\n") == [["a", "b"]]


def test_quoted_comma():
    assert tokenize('a,"b,c",d') == [["a", "b,c", "d"]]


def test_doubled_quote_escape():
    assert tokenize('"He said ""hi"", then left",5') == [['He said "hi", then left', "5"]]


def test_line_break_inside_quotes():
    """Line breaks inside quotes stay in the cell."""
    rows = tokenize('a,"line1\r\nline2"\nb,c')
    assert rows == [["a", "line1\r\nline2"], ["b", "c"]]


def test_unclosed_quote_absorbs_rest():
    """A lone quote keeps the tokenizer in quotes until end of input."""
    assert tokenize('a,"bc\nd,e') == [["a", "bc\nd,e"]]


def test_trailing_delimiter_gives_empty_cell():
    assert tokenize("a,") == [["a", ""]]


def test_blank_line_is_single_empty_cell():
    assert tokenize("a\n\nb") == [["a"], [""], ["b"]]


def test_escape_cell():
    assert escape_cell("plain") == "plain"
    assert escape_cell("x,y") == '"x,y"'
    assert escape_cell('say "hi"') == '"say ""hi"""'
    assert escape_cell("two\nlines") == '"two\nlines"'
    assert escape_cell(None) == ""
    assert escape_cell(5) == "5"


def test_rows_to_csv():
    """Header and rows are joined with LF, no trailing newline."""
    csv_text = rows_to_csv(["h1", "h2"], [["x,y", 'q"'], ["p", "z"]])
    assert csv_text == 'h1,h2\n"x,y","q"""\np,z'


def test_format_row_round_trip():
    cells = ["Ann", 'He said "hi", then left', "multi\nline"]
    assert tokenize(format_row(cells)) == [cells]


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
