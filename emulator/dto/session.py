"""Session-related Data Transfer Objects.

These DTOs are the values exchanged between the grading session and its
host: the exercise handed over by the exercise supplier, the observable
session state enums, and the summary of a completed run.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class SessionStatus(Enum):
    """Lifecycle state of a grading session."""

    IDLE = "idle"
    COMPILING = "compiling"
    EXECUTING = "executing"


class Verdict(Enum):
    """Binary grading outcome of one run."""

    SUCCESS = "success"
    FAIL = "fail"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Exercise:
    """Exercise payload supplied by the host.

    Attributes:
        exercise_id: Unique identifier for the exercise
        language_tag: Free-form teaching language tag (e.g. "python", "Java 17")
        starter_source: Starter snippet shown in the editor
        expected_output: Optional expected output; None means ungraded
    """

    exercise_id: str
    language_tag: str
    starter_source: str
    expected_output: Optional[str] = None


@dataclass(frozen=True)
class RunReport:
    """Summary of one completed run, handed to run observers.

    Attributes:
        exercise_id: Exercise the run belongs to
        language: Resolved language profile id
        predicted: Predicted program output (None if nothing was recognized)
        log: Final composed log lines
        verdict: Grading outcome
    """

    exercise_id: str
    language: str
    predicted: Optional[str]
    log: Tuple[str, ...]
    verdict: Verdict

    @property
    def passed(self) -> bool:
        return self.verdict is Verdict.SUCCESS
