"""
Unit tests for session log composition.
"""

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from config import Config
from emulator.log_composer import compose_error_log, compose_log
from emulator.profiles import resolve_profile


def test_banner_output_and_trailer():
    log = compose_log(resolve_profile("go"), "two")
    assert log == ["> go build main.go", "> ./main", "two", "", "Process finished with exit code 0"]
    print("✓ test_banner_output_and_trailer passed")


def test_missing_output_uses_fallback():
    log = compose_log(resolve_profile("javascript"), None)
    assert log == ["> node index.js", Config.NO_OUTPUT_LINE, "", "Process finished with exit code 0"]
    print("✓ test_missing_output_uses_fallback passed")


def test_empty_string_is_output():
    """A prediction of "" is still printed output, not the fallback."""
    log = compose_log(resolve_profile("javascript"), "")
    assert Config.NO_OUTPUT_LINE not in log
    print("✓ test_empty_string_is_output passed")


def test_engine_lines_without_trailer():
    lines = ["✔ Query OK, 1 row affected"]
    log = compose_log(resolve_profile("sql"), lines)
    assert log[-1] == lines[0]
    assert len(log) == 4
    print("✓ test_engine_lines_without_trailer passed")


def test_error_log():
    log = compose_error_log(resolve_profile("python"), "boom")
    assert log[-3:] == ["Runtime Error: boom", "", "Process finished with exit code 1"]
    print("✓ test_error_log passed")
