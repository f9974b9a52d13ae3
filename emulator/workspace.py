"""Exercise workspace: owns the session of the exercise currently open."""

import logging
from functools import partial
from typing import Callable, Iterable, Optional

from emulator.dto import Exercise
from emulator.scheduler import Scheduler
from emulator.session import GradingSession, RunObserver

logger = logging.getLogger(__name__)


class EmulatorWorkspace:
    """Hands out a fresh GradingSession every time an exercise is opened.

    Sessions are never recycled: re-opening the same exercise id also
    discards the old session, so no log, verdict or edited source leaks
    from one attempt into the next. All sessions share the workspace's
    scheduler.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        on_complete: Optional[Callable[[Exercise], None]] = None,
        observers: Iterable[RunObserver] = (),
    ):
        self.scheduler = scheduler or Scheduler()
        self._on_complete = on_complete
        self._observers = list(observers)
        self._session: Optional[GradingSession] = None

    @property
    def session(self) -> Optional[GradingSession]:
        return self._session

    def open(self, exercise: Exercise) -> GradingSession:
        """Open an exercise, replacing the current session."""
        if self._session is not None:
            logger.debug(f"Discarding session for {self._session.exercise.exercise_id}")

        on_complete = None
        if self._on_complete is not None:
            on_complete = partial(self._on_complete, exercise)

        self._session = GradingSession(
            exercise,
            on_complete=on_complete,
            scheduler=self.scheduler,
            observers=self._observers,
        )
        logger.info(f"Opened exercise {exercise.exercise_id} ({self._session.profile.id})")
        return self._session
