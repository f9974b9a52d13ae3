"""Session log composition.

Builds the console log shown after a run: toolchain banner, program output
(or a fallback line) and, for process-style languages, the exit trailer.
"""

from typing import List, Optional, Sequence, Union

from config import Config
from emulator.profiles import LanguageProfile

Output = Optional[Union[str, Sequence[str]]]


def compose_log(profile: LanguageProfile, output: Output) -> List[str]:
    """Compose the log for a run that produced `output`.

    Args:
        profile: Language profile whose banner is used
        output: Predicted output string, engine output lines, or None

    Returns:
        Ordered log lines
    """
    log = profile.render_banner()

    if isinstance(output, str):
        log.append(output)
    elif output:
        log.extend(output)
    else:
        log.append(Config.NO_OUTPUT_LINE)

    log.extend(_exit_trailer(profile, 0))
    return log


def compose_error_log(profile: LanguageProfile, message: str) -> List[str]:
    """Compose the log for a run whose engine failed."""
    log = profile.render_banner()
    log.append(Config.RUNTIME_ERROR_TEMPLATE.format(message=message))
    log.extend(_exit_trailer(profile, 1))
    return log


def _exit_trailer(profile: LanguageProfile, code: int) -> List[str]:
    if not profile.exit_trailer:
        return []
    return ["", Config.EXIT_LINE_TEMPLATE.format(code=code)]
