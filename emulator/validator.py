"""Verdict validation for predicted program output.

Grading is deliberately lenient: both sides are trimmed and lowercased and
the expected text only has to appear somewhere in the prediction, which
tolerates noise from the heuristic extraction.
"""

from typing import Iterable, Optional

from emulator.dto import Verdict


def normalize(text: Optional[str]) -> str:
    """Trim and lowercase; None becomes the empty string."""
    return (text or "").strip().lower()


def validate(
    predicted: Optional[str],
    expected: Optional[str],
    markers: Iterable[str] = (),
) -> Verdict:
    """Grade a predicted output against the expected output.

    Args:
        predicted: Predicted output (None if nothing was recognized)
        expected: Expected output; absent or blank means the exercise is
            exploratory and always passes
        markers: Extra substrings that also count as a pass (used by
            engines whose output format cannot be matched literally)

    Returns:
        Verdict.SUCCESS or Verdict.FAIL
    """
    wanted = normalize(expected)
    if not wanted:
        return Verdict.SUCCESS

    actual = normalize(predicted)
    if wanted in actual:
        return Verdict.SUCCESS
    if any(normalize(marker) in actual for marker in markers if normalize(marker)):
        return Verdict.SUCCESS
    return Verdict.FAIL
