"""
Unit tests for GradingSession.

Tests cover the IDLE -> COMPILING -> EXECUTING -> IDLE lifecycle, the
reference grading scenarios, mutator guards, completion notifications
and the SQL engine path. Time is driven by a VirtualClock.
"""

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from config import Config
from emulator.dto import Exercise, SessionStatus, Verdict
from emulator.scheduler import Scheduler, VirtualClock
from emulator.session import GradingSession


def make_session(language, source, expected=None, on_complete=None, observers=()):
    """Create a session driven by a virtual clock."""
    scheduler = Scheduler(VirtualClock())
    session = GradingSession(
        Exercise("ex-1", language, source, expected),
        on_complete=on_complete,
        scheduler=scheduler,
        observers=observers,
    )
    return session, scheduler


def finish_run(session, scheduler):
    """Start a run and advance past the compile delay."""
    assert session.run() is True
    scheduler.advance(session.profile.compile_delay)
    assert session.status is SessionStatus.IDLE


class Counter:
    """Zero-argument completion sink that counts invocations."""

    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


# ============================================================================
# Test initial state and lifecycle
# ============================================================================


def test_initial_state():
    session, scheduler = make_session("python", 'print("hi")')
    assert session.status is SessionStatus.IDLE
    assert session.log == ()
    assert session.verdict is None
    assert session.source_text == session.original_source_text == 'print("hi")'
    assert scheduler.pending == 0
    print("✓ test_initial_state passed")


def test_status_sequence():
    """A run passes through every state exactly once, in order."""
    session, scheduler = make_session("python", 'print("hi")')
    seen = []
    engine = session._run_engine

    def spy(source):
        seen.append(session.status)
        return engine(source)

    session._run_engine = spy

    session.run()
    assert session.status is SessionStatus.COMPILING
    scheduler.advance(0.5)
    assert session.status is SessionStatus.COMPILING
    assert seen == []

    scheduler.advance(1.0)
    assert seen == [SessionStatus.EXECUTING]
    assert session.status is SessionStatus.IDLE
    print("✓ test_status_sequence passed")


def test_compiled_languages_take_longer():
    session, scheduler = make_session("rust", 'println!("42")')
    session.run()
    scheduler.advance(Config.INTERPRETED_COMPILE_DELAY)
    assert session.status is SessionStatus.COMPILING
    scheduler.advance(Config.COMPILED_COMPILE_DELAY)
    assert session.status is SessionStatus.IDLE
    print("✓ test_compiled_languages_take_longer passed")


# ============================================================================
# Test grading scenarios
# ============================================================================


def test_scenario_python_ungraded():
    session, scheduler = make_session("python", 'x = "ready"\nprint(x)')
    finish_run(session, scheduler)

    assert session.predicted == "ready"
    assert session.verdict is Verdict.SUCCESS
    assert session.log == (
        "Python 3.10.0 [GCC 11.2.0] on linux",
        ">>> python3 main.py",
        "ready",
        "",
        "Process finished with exit code 0",
    )
    print("✓ test_scenario_python_ungraded passed")


def test_scenario_java_graded_success():
    session, scheduler = make_session(
        "java", 'String x = "done";\nSystem.out.println(x);', expected="done"
    )
    finish_run(session, scheduler)
    assert session.predicted == "done"
    assert session.verdict is Verdict.SUCCESS
    assert "done" in session.log
    print("✓ test_scenario_java_graded_success passed")


def test_scenario_rust_graded_fail_then_reset():
    session, scheduler = make_session("rust", 'println!("42")', expected="100")
    finish_run(session, scheduler)
    assert session.predicted == "42"
    assert session.verdict is Verdict.FAIL

    session.edit_source('println!("100")')
    assert session.reset() is True
    assert session.source_text == 'println!("42")'
    assert session.log == ()
    assert session.verdict is None
    assert session.status is SessionStatus.IDLE
    print("✓ test_scenario_rust_graded_fail_then_reset passed")


def test_no_output_uses_fallback_line():
    session, scheduler = make_session("python", "x = 1")
    finish_run(session, scheduler)
    assert session.predicted is None
    assert Config.NO_OUTPUT_LINE in session.log
    assert session.verdict is Verdict.SUCCESS

    graded, graded_scheduler = make_session("python", "x = 1", expected="1")
    finish_run(graded, graded_scheduler)
    assert graded.verdict is Verdict.FAIL
    print("✓ test_no_output_uses_fallback_line passed")


def test_unknown_language_uses_default_profile():
    session, scheduler = make_session("klingon", 'console.log("qapla")')
    finish_run(session, scheduler)
    assert session.log[0] == "> node index.js"
    assert session.predicted == "qapla"
    print("✓ test_unknown_language_uses_default_profile passed")


def test_symbols_rebuilt_from_current_source():
    session, scheduler = make_session("python", 'x = "a"\nprint(x)')
    finish_run(session, scheduler)
    assert session.predicted == "a"

    session.edit_source('x = "b"\nprint(x)')
    finish_run(session, scheduler)
    assert session.predicted == "b"
    print("✓ test_symbols_rebuilt_from_current_source passed")


# ============================================================================
# Test mutator guards
# ============================================================================


def test_run_while_busy_is_ignored():
    reports = []
    session, scheduler = make_session("python", 'print("hi")', observers=[reports.append])

    assert session.run() is True
    assert session.run() is False
    assert scheduler.pending == 1
    assert session.log == ()
    assert session.verdict is None

    scheduler.advance(5.0)
    assert len(reports) == 1
    print("✓ test_run_while_busy_is_ignored passed")


def test_mutators_ignored_while_compiling():
    session, scheduler = make_session("python", 'print("original")')
    session.run()

    assert session.edit_source('print("edited")') is False
    assert session.reset() is False
    assert session.insert_helper("print()") is False
    assert session.clear_log() is False
    assert session.source_text == 'print("original")'

    scheduler.advance(1.0)
    assert session.predicted == "original"
    print("✓ test_mutators_ignored_while_compiling passed")


def test_insert_helper_spacing():
    session, _ = make_session("python", "")
    session.insert_helper("def")
    assert session.source_text == "def"
    session.insert_helper("main():")
    assert session.source_text == "def main():"

    session.edit_source("return ")
    session.insert_helper("None")
    assert session.source_text == "return None"
    assert "print()" in session.syntax_helpers
    print("✓ test_insert_helper_spacing passed")


def test_clear_log_keeps_source():
    session, scheduler = make_session("python", 'print("hi")')
    session.edit_source('print("edited")')
    finish_run(session, scheduler)
    assert session.predicted == "edited"

    assert session.clear_log() is True
    assert session.log == ()
    assert session.verdict is None
    assert session.predicted is None
    assert session.source_text == 'print("edited")'
    print("✓ test_clear_log_keeps_source passed")


# ============================================================================
# Test completion notifications
# ============================================================================


def test_success_notifies_once_after_delay():
    sink = Counter()
    session, scheduler = make_session("python", 'print("hi")', expected="hi", on_complete=sink)
    finish_run(session, scheduler)

    assert sink.calls == 0
    assert scheduler.pending == 1
    scheduler.advance(Config.COMPLETION_DELAY)
    assert sink.calls == 1
    scheduler.advance(60.0)
    assert sink.calls == 1
    print("✓ test_success_notifies_once_after_delay passed")


def test_fail_never_notifies():
    sink = Counter()
    session, scheduler = make_session("python", 'print("hi")', expected="bye", on_complete=sink)
    finish_run(session, scheduler)

    assert scheduler.pending == 0
    scheduler.advance(60.0)
    assert sink.calls == 0
    print("✓ test_fail_never_notifies passed")


def test_each_successful_run_notifies():
    sink = Counter()
    session, scheduler = make_session("python", 'print("hi")', on_complete=sink)
    for _ in range(2):
        finish_run(session, scheduler)
        scheduler.advance(Config.COMPLETION_DELAY)
    assert sink.calls == 2
    print("✓ test_each_successful_run_notifies passed")


def test_reset_does_not_cancel_pending_notification():
    sink = Counter()
    session, scheduler = make_session("python", 'print("hi")', on_complete=sink)
    finish_run(session, scheduler)

    session.reset()
    scheduler.advance(Config.COMPLETION_DELAY)
    assert sink.calls == 1
    print("✓ test_reset_does_not_cancel_pending_notification passed")


def test_observers_receive_report():
    reports = []
    session, scheduler = make_session(
        "java", 'System.out.println("hi");', expected="hi", observers=[reports.append]
    )
    finish_run(session, scheduler)

    assert len(reports) == 1
    report = reports[0]
    assert report.exercise_id == "ex-1"
    assert report.language == "java"
    assert report.predicted == "hi"
    assert report.passed
    assert report.log == session.log
    print("✓ test_observers_receive_report passed")


def test_failing_observer_does_not_break_run():
    """An observer that raises is logged; later observers and completion still run."""
    reports = []
    sink = Counter()

    def broken(report):
        raise RuntimeError("display went away")

    session, scheduler = make_session(
        "python", 'print("hi")', expected="hi", on_complete=sink, observers=[broken, reports.append]
    )
    finish_run(session, scheduler)

    assert session.verdict is Verdict.SUCCESS
    assert len(reports) == 1
    assert scheduler.pending == 1
    scheduler.advance(Config.COMPLETION_DELAY)
    assert sink.calls == 1
    print("✓ test_failing_observer_does_not_break_run passed")


# ============================================================================
# Test engine paths
# ============================================================================


def test_sql_session():
    session, scheduler = make_session(
        "sql", "SELECT name FROM users WHERE role = 'Admin';", expected="Alice"
    )
    finish_run(session, scheduler)

    assert session.verdict is Verdict.SUCCESS
    assert session.log[0] == "SQLite version 3.39.3 2022-09-05"
    assert "| Alice    |" in session.log
    assert session.log[-1] == "(1 rows)"
    print("✓ test_sql_session passed")


def test_engine_error_is_graded_fail():
    sink = Counter()
    session, scheduler = make_session("python", 'print("hi")', on_complete=sink)

    def broken(source):
        raise RuntimeError("boom")

    session._run_engine = broken
    finish_run(session, scheduler)

    assert session.verdict is Verdict.FAIL
    assert "Runtime Error: boom" in session.log
    assert session.log[-1] == "Process finished with exit code 1"
    scheduler.advance(60.0)
    assert sink.calls == 0
    print("✓ test_engine_error_is_graded_fail passed")
