"""Data Transfer Objects for the emulator core."""

from .session import (
    Exercise,
    RunReport,
    SessionStatus,
    Verdict,
)

__all__ = [
    # Enums
    "SessionStatus",
    "Verdict",
    # Session DTOs
    "Exercise",
    "RunReport",
]
