"""
Output predictor.

Guesses what a snippet prints by locating its first output statement with
the active language profile's recognizers and resolving the argument
against the symbol table.

Only the first recognized output call in the whole document is predicted;
later output statements are never considered.
"""

import logging
from typing import Dict, Optional

from emulator.profiles import LanguageProfile
from emulator.symbols import strip_quotes

logger = logging.getLogger(__name__)

QUOTE_CHARS = "\"'`"


def predict_output(
    source_text: str,
    profile: LanguageProfile,
    symbols: Dict[str, str],
) -> Optional[str]:
    """Predict the printed output of a snippet.

    Recognizers are tried in priority order, each against the entire
    source text. The first recognizer that matches anywhere wins.

    Args:
        source_text: Source snippet
        profile: Active language profile
        symbols: Symbol table built from the same source

    Returns:
        Best-guess printed value, or None if no output statement was found
    """
    for recognizer in profile.output_recognizers:
        captured = recognizer.extract(source_text or "")
        if captured is None:
            continue

        logger.debug(
            f"[{profile.id}] {recognizer.capture.value} recognizer captured: {captured!r}"
        )
        return resolve_expression(captured, symbols)

    return None


def resolve_expression(expression: str, symbols: Dict[str, str]) -> str:
    """Resolve a captured output argument.

    Quoted literals lose their quotes, bare identifiers bound in the symbol
    table become their value, and anything else (numbers, arithmetic,
    multi-argument lists) is returned verbatim.
    """
    clean = expression.strip()
    if clean.endswith(";"):
        clean = clean[:-1].rstrip()

    if is_quoted(clean):
        return strip_quotes(clean)
    if clean in symbols:
        return symbols[clean]
    return clean


def is_quoted(text: str) -> bool:
    """True if text is delimited by a matching pair of quote characters."""
    return len(text) >= 2 and text[0] == text[-1] and text[0] in QUOTE_CHARS
