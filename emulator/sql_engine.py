"""
In-memory SQL engine for SQL exercises.

Runs a single query against a small mock `users` table and renders the
result the way a terminal client would (ASCII table plus row count).
Only the shapes used in beginner exercises are understood:

- SELECT <columns|*> FROM ... [WHERE a op b [AND ...]] [ORDER BY col [ASC|DESC]] [LIMIT n]
- INSERT / UPDATE / DELETE (acknowledged, not applied)

Anything else yields a syntax error line. The engine never raises on
malformed queries.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

MOCK_USERS = (
    {"id": 1, "name": "Alice", "role": "Admin", "active": 1, "age": 30},
    {"id": 2, "name": "Bob", "role": "User", "active": 0, "age": 25},
    {"id": 3, "name": "Charlie", "role": "User", "active": 1, "age": 35},
    {"id": 4, "name": "David", "role": "Guest", "active": 1, "age": 20},
)

MIN_COLUMN_WIDTH = 8

_CONDITION = re.compile(r"^\s*(\w+)\s*(<>|!=|>=|<=|=|>|<)\s*(.+?)\s*$")
_ORDER_BY = re.compile(r"ORDER\s+BY\s+(\w+)(?:\s+(ASC|DESC))?")
_LIMIT = re.compile(r"LIMIT\s+(\d+)")

_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "=": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    "<>": lambda a, b: a != b,
    ">": lambda a, b: a > b,
    "<": lambda a, b: a < b,
    ">=": lambda a, b: a >= b,
    "<=": lambda a, b: a <= b,
}


class SqlEngine:
    """Executes one query against an in-memory copy of the mock table."""

    def __init__(self, rows=None):
        self.rows: List[Dict[str, Any]] = [dict(row) for row in (rows or MOCK_USERS)]
        self.columns: List[str] = list(self.rows[0].keys()) if self.rows else []

    def execute(self, query: str) -> List[str]:
        """Execute a query and return the rendered output lines."""
        clean = " ".join((query or "").replace(";", "").split()).upper()

        if clean.startswith("SELECT"):
            return self._select(clean)
        if clean.startswith("INSERT"):
            return ["✔ Query OK, 1 row affected"]
        if clean.startswith("UPDATE"):
            return ["✔ Query OK, 1 row affected, 1 warning"]
        if clean.startswith("DELETE"):
            return ["✔ Query OK, 1 row affected"]

        command = clean.split(" ")[0] if clean else ""
        return [f'⚠ Syntax Error: Unknown command starting at "{command}"']

    # ------------------------------------------------------------------
    # SELECT
    # ------------------------------------------------------------------

    def _select(self, clean: str) -> List[str]:
        results = list(self.rows)

        if " WHERE " in clean:
            where_clause = re.split(r"\bWHERE\b", clean, maxsplit=1)[1]
            where_clause = re.split(r"\b(?:GROUP|ORDER|LIMIT)\b", where_clause)[0]
            for condition in re.split(r"\bAND\b", where_clause):
                predicate = self._parse_condition(condition)
                if predicate is not None:
                    results = [row for row in results if predicate(row)]

        order = _ORDER_BY.search(clean)
        if order:
            column = order.group(1).lower()
            if column in self.columns:
                results.sort(
                    key=lambda row: _sort_key(row[column]),
                    reverse=order.group(2) == "DESC",
                )

        limit = _LIMIT.search(clean)
        if limit:
            results = results[: int(limit.group(1))]

        columns = self._selected_columns(clean)
        return _render_table(columns, results)

    def _selected_columns(self, clean: str) -> List[str]:
        select_part = clean.split("FROM")[0].replace("SELECT", "", 1).strip()
        if "*" in select_part or not select_part:
            return list(self.columns)
        requested = [column.strip().lower() for column in select_part.split(",")]
        return [column for column in self.columns if column in requested]

    def _parse_condition(self, condition: str) -> Optional[Callable[[Dict[str, Any]], bool]]:
        """Turn `column op literal` into a row predicate; None if not understood."""
        match = _CONDITION.match(condition)
        if not match:
            logger.debug(f"Ignoring WHERE condition: {condition.strip()!r}")
            return None

        column, operator, literal = match.group(1).lower(), match.group(2), match.group(3)
        if column not in self.columns:
            logger.debug(f"Ignoring WHERE condition on unknown column: {column}")
            return None

        value = _parse_literal(literal)
        compare = _OPERATORS[operator]

        def predicate(row: Dict[str, Any]) -> bool:
            cell = row[column]
            if isinstance(cell, str):
                return compare(cell.upper(), str(value).upper())
            if isinstance(value, str):
                return False
            return compare(cell, value)

        return predicate


def _parse_literal(literal: str) -> Any:
    literal = literal.strip()
    if len(literal) >= 2 and literal[0] == literal[-1] and literal[0] in "'\"":
        return literal[1:-1]
    try:
        return int(literal)
    except ValueError:
        try:
            return float(literal)
        except ValueError:
            return literal


def _sort_key(value: Any):
    return value.lower() if isinstance(value, str) else value


def _render_table(columns: List[str], rows: List[Dict[str, Any]]) -> List[str]:
    """Render rows as an ASCII table with a leading status line."""
    widths = [
        max([len(column), MIN_COLUMN_WIDTH] + [len(str(row[column])) for row in rows])
        for column in columns
    ]
    divider = "+-" + "-+-".join("-" * width for width in widths) + "-+"
    header = "| " + " | ".join(column.ljust(width) for column, width in zip(columns, widths)) + " |"

    output = [f"✔ Query OK, {len(rows)} rows retrieved", "", divider, header, divider]
    for row in rows:
        output.append(
            "| "
            + " | ".join(str(row[column]).ljust(width) for column, width in zip(columns, widths))
            + " |"
        )
    output.append(divider)
    output.append(f"({len(rows)} rows)")
    return output
