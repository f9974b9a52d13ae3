"""
Code Emulator - heuristic output prediction and grading for coding exercises.

Main components:
- resolve_profile: Language profile registry
- build_symbols / predict_output: Heuristic static analysis of snippets
- validate: Lenient verdict validation
- GradingSession: Execution lifecycle of one exercise attempt
- EmulatorWorkspace: Fresh session per opened exercise
"""

from emulator.dto import Exercise, RunReport, SessionStatus, Verdict
from emulator.log_composer import compose_log
from emulator.predictor import predict_output
from emulator.profiles import (
    DEFAULT_PROFILE,
    LanguageProfile,
    available_profiles,
    resolve_profile,
)
from emulator.scheduler import MonotonicClock, Scheduler, VirtualClock
from emulator.session import GradingSession
from emulator.symbols import build_symbols
from emulator.validator import validate
from emulator.workspace import EmulatorWorkspace

__all__ = [
    "Exercise",
    "RunReport",
    "SessionStatus",
    "Verdict",
    "LanguageProfile",
    "DEFAULT_PROFILE",
    "resolve_profile",
    "available_profiles",
    "build_symbols",
    "predict_output",
    "validate",
    "compose_log",
    # Lifecycle
    "Scheduler",
    "MonotonicClock",
    "VirtualClock",
    "GradingSession",
    "EmulatorWorkspace",
]
