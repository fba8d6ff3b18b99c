"""
CSV tokenizer.

Splits raw export text into rows of cells and serializes rows back.
Every other module goes through this one for delimiter handling.
"""

from typing import Iterable, List

QUOTE = '"'
DELIMITER = ","
_NEEDS_QUOTING = (",", '"', "\n", "\r")


def tokenize(text: str) -> List[List[str]]:
    """
    Tokenize CSV text into rows of cells.

    Handles quoted fields, doubled-quote escaping and CR, LF or CRLF
    line endings. An unclosed quote absorbs the rest of the input into
    the last cell instead of raising.

    Args:
        text: Raw CSV text

    Returns:
        List of rows, each a list of cell strings
    """
    rows: List[List[str]] = []
    row: List[str] = []
    cell: List[str] = []
    in_quotes = False
    length = len(text)
    i = 0

    while i < length:
        char = text[i]
        next_char = text[i + 1] if i + 1 < length else ""

        if char == QUOTE:
            if in_quotes and next_char == QUOTE:
                cell.append(QUOTE)
                i += 1  # Skip escaped quote
            else:
                in_quotes = not in_quotes
        elif char == DELIMITER and not in_quotes:
            row.append("".join(cell))
            cell = []
        elif char in ("\r", "\n") and not in_quotes:
            if char == "\r" and next_char == "\n":
                i += 1
            row.append("".join(cell))
            rows.append(row)
            row = []
            cell = []
        else:
            cell.append(char)
        i += 1

    # No trailing newline
    if cell or row:
        row.append("".join(cell))
        rows.append(row)

    return rows


def escape_cell(value) -> str:
    """Quote a cell if it contains a delimiter, quote or line break."""
    if value is None:
        return ""
    text = str(value)
    if any(token in text for token in _NEEDS_QUOTING):
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text


def format_row(cells: Iterable) -> str:
    return DELIMITER.join(escape_cell(cell) for cell in cells)


def rows_to_csv(header: List[str], rows: Iterable[List[str]]) -> str:
    """
    Serialize a header row and data rows back to CSV text.

    Lines are joined with LF and there is no trailing newline.
    """
    lines = [format_row(header)]
    lines.extend(format_row(row) for row in rows)
    return "\n".join(lines)
