"""Split raw import file text into positional rows."""

import re
from dataclasses import dataclass, field

from ...core.logging import get_logger
from .columns import COLUMNS, IDENTIFYING_FIELDS, ImportSchema

logger = get_logger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True)
class RawRow:
    """One data line mapped onto the columns of its schema.

    Attributes:
        line_number: 1-based line number in the uploaded file
        values: column name -> trimmed text, missing trailing columns as ""
        extra_fields: trailing fields beyond the schema, ignored downstream
    """

    line_number: int
    values: dict[str, str]
    extra_fields: tuple[str, ...] = field(default=())

    def get(self, column: str) -> str:
        return self.values.get(column, "")


def split_fields(line: str) -> list[str]:
    """Split one line on commas that are outside double quotes.

    Quote characters only toggle quoting and are not kept in the output.
    Each field is trimmed of surrounding whitespace.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def map_columns(fields: list[str], schema: ImportSchema) -> tuple[dict[str, str], tuple[str, ...]]:
    """Assign fields to columns by position."""
    columns = COLUMNS[schema]
    values = {
        column: fields[position] if position < len(fields) else ""
        for position, column in enumerate(columns)
    }
    return values, tuple(fields[len(columns):])


def is_identifying(values: dict[str, str]) -> bool:
    return any(values.get(name) for name in IDENTIFYING_FIELDS)


def tokenize(text: str, schema: ImportSchema) -> list[RawRow]:
    """Turn file text into rows, dropping blank lines and the header line."""
    numbered_lines = [
        (number, line)
        for number, line in enumerate(_LINE_BREAK.split(text), start=1)
        if line.strip()
    ]
    if len(numbered_lines) < 2:
        return []

    rows: list[RawRow] = []
    for line_number, line in numbered_lines[1:]:
        values, extra = map_columns(split_fields(line), schema)
        if not is_identifying(values):
            continue
        if any(extra):
            logger.debug(
                "Ignoring %d extra field(s) on line %d", len(extra), line_number
            )
        rows.append(RawRow(line_number=line_number, values=values, extra_fields=extra))

    return rows
