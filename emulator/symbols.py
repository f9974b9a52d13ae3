"""
Symbol table builder.

Scans source text line by line for assignment-like statements and maps
each identifier to the literal text of its last assigned value. This is a
heuristic scan, not a parser: unrecognized lines are skipped, nothing is
evaluated, and it never raises.
"""

import re
from typing import Dict, Optional, Tuple

COMMENT_PREFIXES = ("//", "#", "/*", "*", "--")

PREFIX_TOKEN = r"(?:[\w<>\[\],.&*$?]|::)+"
ANNOTATION = r"(?::\s*[\w<>\[\]?,.&* ]+?)?"

# Ordered by priority; each pattern yields "name" and "value".
ASSIGNMENT_PATTERNS = [
    # Go-style typed declarations: var x string = "a"
    (
        re.compile(
            r"^(?:var|const)\s+(?P<name>[A-Za-z_]\w*)\s+[\w\[\]*.]+\s*=(?!=)\s*(?P<value>.*?)\s*;?\s*$"
        ),
        "typed_var",
    ),
    # Declarations and assignments with any keyword/type prefix:
    #   x = 1;  x := "a"  let mut x: i32 = 5;  private static final String G = "a";
    #   char *name = "Bob";  List<int> n = 7;  let s: &str = "a";  $x = "b";
    (
        re.compile(
            r"^(?:" + PREFIX_TOKEN + r"\s+)*[&*]*(?P<name>\$?[A-Za-z_]\w*)\s*" + ANNOTATION
            + r"\s*(?::=|=)(?!=)\s*(?P<value>.*?)\s*;?\s*$"
        ),
        "declaration",
    ),
]


def build_symbols(source_text: str) -> Dict[str, str]:
    """Build a name -> literal value mapping from assignment statements.

    Later assignments to the same name overwrite earlier ones.

    Args:
        source_text: Source snippet to scan

    Returns:
        Dict mapping identifiers to their unquoted right-hand side
    """
    symbols: Dict[str, str] = {}

    for line in (source_text or "").splitlines():
        binding = match_assignment(line)
        if binding is not None:
            name, value = binding
            symbols[name] = value

    return symbols


def match_assignment(line: str) -> Optional[Tuple[str, str]]:
    """Try the assignment patterns on one line.

    Returns:
        (name, value) for the first matching pattern, or None
    """
    stripped = line.strip()
    if not stripped or stripped.startswith(COMMENT_PREFIXES):
        return None

    for pattern, _pattern_type in ASSIGNMENT_PATTERNS:
        match = pattern.match(stripped)
        if match:
            value = match.group("value").strip()
            if value.endswith(";"):
                value = value[:-1].rstrip()
            return match.group("name"), strip_quotes(value)

    return None


def strip_quotes(text: str) -> str:
    """Remove one pair of matching surrounding quotes, if present."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'`":
        return text[1:-1]
    return text
