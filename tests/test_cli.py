"""
Tests for the command-line interface, using click's test runner.
"""

import sys
import os
import json

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from click.testing import CliRunner

from cli import cli, load_exercise


def test_run_passes(tmp_path):
    source = tmp_path / "hello.py"
    source.write_text('x = "ready"\nprint(x)\n')

    result = CliRunner().invoke(cli, ["run", str(source), "--fast", "--expected", "ready"])
    assert result.exit_code == 0, result.output
    assert "ready" in result.output
    assert "Output accepted" in result.output
    print("✓ test_run_passes passed")


def test_run_fails_with_exit_code(tmp_path):
    source = tmp_path / "main.rs"
    source.write_text('fn main() {\n    println!("42");\n}\n')

    result = CliRunner().invoke(cli, ["run", str(source), "--fast", "-e", "100"])
    assert result.exit_code == 1
    assert "Compiling playground" in result.output
    print("✓ test_run_fails_with_exit_code passed")


def test_exercise_file(tmp_path):
    path = tmp_path / "lesson.json"
    path.write_text(
        json.dumps(
            {
                "id": "java-101",
                "language": "java",
                "starter": 'String x = "done";\nSystem.out.println(x);',
                "expected": "done",
            }
        )
    )

    exercise = load_exercise(path)
    assert exercise.exercise_id == "java-101"
    assert exercise.expected_output == "done"

    result = CliRunner().invoke(cli, ["exercise", str(path), "--fast"])
    assert result.exit_code == 0, result.output
    assert "java-101" in result.output
    print("✓ test_exercise_file passed")


def test_exercise_file_with_numeric_expected(tmp_path):
    """Non-string JSON values are graded as their text."""
    path = tmp_path / "numbers.json"
    path.write_text(json.dumps({"language": "python", "starter": "print(42)", "expected": 42}))

    exercise = load_exercise(path)
    assert exercise.exercise_id == "numbers"
    assert exercise.expected_output == "42"

    result = CliRunner().invoke(cli, ["exercise", str(path), "--fast"])
    assert result.exit_code == 0, result.output
    assert "Output accepted" in result.output
    print("✓ test_exercise_file_with_numeric_expected passed")


def test_invalid_exercise_file_aborts(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    result = CliRunner().invoke(cli, ["exercise", str(path), "--fast"])
    assert result.exit_code != 0
    assert "Invalid exercise file" in result.output
    print("✓ test_invalid_exercise_file_aborts passed")


def test_languages_and_helpers():
    runner = CliRunner()
    result = runner.invoke(cli, ["languages"])
    assert result.exit_code == 0
    assert "python" in result.output
    assert "sql" in result.output

    result = runner.invoke(cli, ["helpers", "rust"])
    assert result.exit_code == 0
    assert "println!()" in result.output
    print("✓ test_languages_and_helpers passed")
