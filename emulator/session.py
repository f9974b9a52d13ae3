"""
Grading session: the execution lifecycle of one exercise attempt.

A session owns the learner's source text and the result of the latest run.
Each run moves through IDLE -> COMPILING -> EXECUTING -> IDLE:

1. run() clears the previous result and enters COMPILING.
2. After the profile's simulated compile delay the snippet is "executed":
   the symbol table is rebuilt from the current source, the output is
   predicted (or the SQL engine is run), the log is composed and the
   verdict computed, and the session returns to IDLE.
3. On SUCCESS the completion callback is scheduled once, after a short
   delay so the host can show the log first.

All mutators are ignored while a run is in flight, so at most one run is
active per session. A new exercise always gets a new session.
"""

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from config import Config
from emulator.dto import Exercise, RunReport, SessionStatus, Verdict
from emulator.log_composer import compose_error_log, compose_log
from emulator.predictor import predict_output
from emulator.profiles import Engine, LanguageProfile, resolve_profile
from emulator.scheduler import Scheduler
from emulator.sql_engine import SqlEngine
from emulator.symbols import build_symbols
from emulator.validator import validate

logger = logging.getLogger(__name__)

RunObserver = Callable[[RunReport], None]


class GradingSession:
    """Execution lifecycle controller for a single exercise attempt."""

    def __init__(
        self,
        exercise: Exercise,
        on_complete: Optional[Callable[[], None]] = None,
        scheduler: Optional[Scheduler] = None,
        observers: Iterable[RunObserver] = (),
    ):
        """Initialize a session in the IDLE state.

        Args:
            exercise: Exercise supplied by the host
            on_complete: Zero-argument completion sink, notified after each
                successful run
            scheduler: Scheduler driving the simulated delays (default: a
                real-time scheduler)
            observers: Callables receiving a RunReport after every run
        """
        self.exercise = exercise
        self.profile: LanguageProfile = resolve_profile(exercise.language_tag)
        self.scheduler = scheduler or Scheduler()
        self._on_complete = on_complete
        self._observers: List[RunObserver] = list(observers)

        self._original_source = exercise.starter_source or ""
        self._source = self._original_source
        self._status = SessionStatus.IDLE
        self._log: List[str] = []
        self._verdict: Optional[Verdict] = None
        self._predicted: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"GradingSession(exercise={self.exercise.exercise_id!r}, "
            f"language={self.profile.id!r}, status={self._status.value})"
        )

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def log(self) -> Tuple[str, ...]:
        return tuple(self._log)

    @property
    def verdict(self) -> Optional[Verdict]:
        return self._verdict

    @property
    def predicted(self) -> Optional[str]:
        """Output predicted by the latest run (None if nothing was recognized)."""
        return self._predicted

    @property
    def source_text(self) -> str:
        return self._source

    @property
    def original_source_text(self) -> str:
        return self._original_source

    @property
    def expected_output(self) -> Optional[str]:
        return self.exercise.expected_output

    @property
    def syntax_helpers(self) -> Tuple[str, ...]:
        return self.profile.syntax_helpers

    @property
    def is_idle(self) -> bool:
        return self._status is SessionStatus.IDLE

    def add_observer(self, observer: RunObserver) -> None:
        self._observers.append(observer)

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def run(self) -> bool:
        """Start a run.

        Returns:
            True if the run was started, False if one is already in flight
        """
        if not self._require_idle("run"):
            return False

        self._log = []
        self._verdict = None
        self._predicted = None
        self._status = SessionStatus.COMPILING
        logger.info(f"[{self.exercise.exercise_id}] Compiling {self.profile.id} snippet")

        self.scheduler.schedule(
            self.profile.compile_delay,
            self._execute,
            name=f"{self.exercise.exercise_id}:compile",
        )
        return True

    def reset(self) -> bool:
        """Restore the starter snippet and clear the log and verdict.

        A completion notification already scheduled by an earlier run is
        not affected.
        """
        if not self._require_idle("reset"):
            return False

        self._source = self._original_source
        self._log = []
        self._verdict = None
        self._predicted = None
        return True

    def edit_source(self, text: str) -> bool:
        """Replace the source text wholesale."""
        if not self._require_idle("edit_source"):
            return False

        self._source = text or ""
        return True

    def insert_helper(self, token: str) -> bool:
        """Append a syntax-helper token, space-separated from the existing text."""
        if not self._require_idle("insert_helper"):
            return False

        separator = " " if self._source and not self._source.endswith(" ") else ""
        self._source = f"{self._source}{separator}{token}"
        return True

    def clear_log(self) -> bool:
        """Clear the log and the latest result, keeping the source text."""
        if not self._require_idle("clear_log"):
            return False

        self._log = []
        self._verdict = None
        self._predicted = None
        return True

    # ------------------------------------------------------------------
    # Run phases
    # ------------------------------------------------------------------

    def _execute(self) -> None:
        self._status = SessionStatus.EXECUTING
        source = self._source

        try:
            predicted, output = self._run_engine(source)
            log = compose_log(self.profile, output)
            verdict = validate(predicted, self.expected_output, self.profile.success_markers)
        except Exception as e:
            logger.warning(f"[{self.exercise.exercise_id}] Engine failed: {e}")
            predicted = None
            log = compose_error_log(self.profile, str(e))
            verdict = Verdict.FAIL

        self._predicted = predicted
        self._log = log
        self._verdict = verdict
        self._status = SessionStatus.IDLE
        logger.info(
            f"[{self.exercise.exercise_id}] Finished: predicted={predicted!r}, verdict={verdict.value}"
        )

        if verdict is Verdict.SUCCESS and self._on_complete is not None:
            self.scheduler.schedule(
                Config.COMPLETION_DELAY,
                self._on_complete,
                name=f"{self.exercise.exercise_id}:complete",
            )

        report = RunReport(
            exercise_id=self.exercise.exercise_id,
            language=self.profile.id,
            predicted=predicted,
            log=tuple(log),
            verdict=verdict,
        )
        for observer in self._observers:
            try:
                observer(report)
            except Exception as e:
                logger.warning(f"[{self.exercise.exercise_id}] Run observer failed: {e}")

    def _run_engine(self, source: str):
        """Produce (predicted output, log output) for the current source."""
        if self.profile.engine is Engine.SQL:
            lines = SqlEngine().execute(source)
            return "\n".join(lines), lines

        # Rebuilt on every run; never cached across runs
        symbols = build_symbols(source)
        predicted = predict_output(source, self.profile, symbols)
        return predicted, predicted

    def _require_idle(self, action: str) -> bool:
        if self._status is SessionStatus.IDLE:
            return True
        logger.debug(
            f"[{self.exercise.exercise_id}] Ignoring {action}() while {self._status.value}"
        )
        return False
