"""
Configuration settings for the code emulator.

This module provides the Config class with all settings.
Simulation delays are constants; only presentation defaults can be
overridden via environment variables or a .env file.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Try multiple locations for .env
for env_path in [
    Path.cwd() / ".env",  # Current working directory
    Path(__file__).parent.parent / ".env",  # Package root (when running from source)
    Path.home() / ".emulator" / ".env",  # User config directory
]:
    if env_path.exists():
        load_dotenv(env_path, override=True)
        break


class Config:
    """Main configuration class for the code emulator."""

    # Language used when an exercise carries no language tag
    DEFAULT_LANGUAGE = os.getenv("EMULATOR_DEFAULT_LANGUAGE", "javascript")

    # Logging level used by the CLI when --verbose is not given
    LOG_LEVEL = os.getenv("EMULATOR_LOG_LEVEL", "WARNING").upper()

    # Simulated latency (seconds)
    INTERPRETED_COMPILE_DELAY = 0.6
    COMPILED_COMPILE_DELAY = 1.2
    COMPLETION_DELAY = 1.5  # Lets the host render the log before advancing

    # Log texts
    NO_OUTPUT_LINE = "(Program exited with no output)"
    EXIT_LINE_TEMPLATE = "Process finished with exit code {code}"
    RUNTIME_ERROR_TEMPLATE = "Runtime Error: {message}"

    # Exercise files accepted by the CLI
    EXERCISE_FILE_ENCODING = "utf-8"
