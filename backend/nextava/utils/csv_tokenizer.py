"""Lenient CSV tokenizer for the published availability sheet.

Handles quoted fields containing commas, doubled quotes, and ``\\n``,
``\\r\\n`` or bare ``\\r`` line endings. Malformed quoting never raises;
the tokenizer recovers as best it can and always returns a table.
"""

from nextava.models import RawTable

_QUOTE = '"'
_DELIMITER = ","
_TERMINATORS = ("\n", "\r")


def tokenize(text: str) -> RawTable:
    """Split CSV text into rows of string cells.

    A row is emitted only when it holds at least one completed field or a
    non-empty pending field, so blank lines (including a trailing newline)
    never produce empty rows. Line terminators inside an open quote are
    kept as data.

    Args:
        text: Raw CSV text.

    Returns:
        Rows of cells in input order. Empty input yields an empty list.
    """
    rows: RawTable = []
    row: list[str] = []
    field: list[str] = []
    in_quotes = False

    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        next_char = text[i + 1] if i + 1 < length else ""

        if char == _QUOTE:
            if in_quotes and next_char == _QUOTE:
                field.append(_QUOTE)
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == _DELIMITER and not in_quotes:
            row.append("".join(field))
            field = []
        elif char in _TERMINATORS and not in_quotes:
            if char == "\r" and next_char == "\n":
                i += 1
            if field or row:
                row.append("".join(field))
                rows.append(row)
                row = []
                field = []
        else:
            field.append(char)
        i += 1

    if field or row:
        row.append("".join(field))
        rows.append(row)

    return rows


def _quote_cell(cell: str) -> str:
    if any(c in cell for c in (_DELIMITER, _QUOTE, "\n", "\r")):
        return _QUOTE + cell.replace(_QUOTE, _QUOTE * 2) + _QUOTE
    return cell


def serialize_csv(table: RawTable) -> str:
    """Render a table back to CSV text with ``\\n`` row terminators."""
    return "".join(
        _DELIMITER.join(_quote_cell(cell) for cell in row) + "\n" for row in table
    )
