"""
Language profile registry.

Each supported teaching language is described by an immutable
LanguageProfile: the output-statement recognizers the predictor tries
(in priority order), the cosmetic toolchain banner printed before the
program output, and a few presentation details (file name, compile delay,
quick-insert syntax helpers).

Recognizers are data: adding a language means adding a profile and a
registry entry, never touching the predictor or the session.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Pattern, Tuple

from config import Config


class CaptureRule(Enum):
    """How the "arg" group of a recognizer match becomes an expression."""

    CALL = "call"  # print(x), System.out.println(x)
    STREAM = "stream"  # cout << x << endl;
    STATEMENT = "statement"  # puts x, echo x;


class Engine(Enum):
    """Execution engine that produces the program output."""

    HEURISTIC = "heuristic"  # Symbol table + output predictor
    SQL = "sql"  # In-memory query engine


@dataclass(frozen=True)
class OutputRecognizer:
    """A single output-statement pattern with its capture rule."""

    pattern: Pattern[str]
    capture: CaptureRule = CaptureRule.CALL

    def extract(self, source_text: str) -> Optional[str]:
        """Return the captured argument of the first match, or None."""
        match = self.pattern.search(source_text)
        if match is None:
            return None

        arg = match.group("arg")
        if self.capture is CaptureRule.STREAM:
            # First operand only: cout << "a" << x;
            arg = arg.split("<<")[0].split(";")[0]
        elif self.capture is CaptureRule.STATEMENT:
            arg = arg.split(";")[0]
        return arg.strip()


@dataclass(frozen=True)
class LanguageProfile:
    """Immutable per-language description used by the grading pipeline.

    Attributes:
        id: Canonical language id (e.g. "python")
        display_name: Human-readable name
        output_recognizers: Output-statement recognizers in priority order
        banner_lines: Toolchain banner templates ({source}, {binary})
        file_extension: Default source file extension, with the dot
        entry_point: Base name of the simulated source file / binary
        compile_delay: Simulated compile time in seconds
        syntax_helpers: Quick-insert tokens offered to the learner
        engine: Engine producing the output
        success_markers: Extra substrings accepted as a pass when grading
        exit_trailer: Whether the log ends with a process exit line
    """

    id: str
    display_name: str
    output_recognizers: Tuple[OutputRecognizer, ...]
    banner_lines: Tuple[str, ...]
    file_extension: str
    entry_point: str = "main"
    compile_delay: float = Config.INTERPRETED_COMPILE_DELAY
    syntax_helpers: Tuple[str, ...] = ()
    engine: Engine = Engine.HEURISTIC
    success_markers: Tuple[str, ...] = ()
    exit_trailer: bool = True

    @property
    def source_file(self) -> str:
        return f"{self.entry_point}{self.file_extension}"

    @property
    def is_compiled(self) -> bool:
        return self.compile_delay >= Config.COMPILED_COMPILE_DELAY

    def render_banner(self):
        """Fill the banner templates with this profile's file names."""
        return [
            line.format(source=self.source_file, binary=self.entry_point)
            for line in self.banner_lines
        ]


def _call(prefix: str, line_start: bool = False) -> OutputRecognizer:
    """Recognizer for a call-style output statement: prefix(arg)."""
    anchor = r"^[ \t]*" if line_start else ""
    pattern = re.compile(anchor + prefix + r"[ \t]*\((?P<arg>.*)\)", re.MULTILINE)
    return OutputRecognizer(pattern, CaptureRule.CALL)


def _stream(prefix: str) -> OutputRecognizer:
    """Recognizer for stream insertion: prefix << arg."""
    pattern = re.compile(prefix + r"[ \t]*<<(?P<arg>[^\n]*)", re.MULTILINE)
    return OutputRecognizer(pattern, CaptureRule.STREAM)


def _statement(keyword: str) -> OutputRecognizer:
    """Recognizer for keyword statements without parentheses: keyword arg."""
    pattern = re.compile(r"^[ \t]*" + keyword + r"[ \t]+(?P<arg>[^\n]+)", re.MULTILINE)
    return OutputRecognizer(pattern, CaptureRule.STATEMENT)


# =============================================================================
# Profiles
# =============================================================================

PYTHON = LanguageProfile(
    id="python",
    display_name="Python",
    output_recognizers=(_call(r"print", line_start=True),),
    banner_lines=("Python 3.10.0 [GCC 11.2.0] on linux", ">>> python3 {source}"),
    file_extension=".py",
    syntax_helpers=(
        "def", "print()", "return", "if", "else:", "elif", "for", "in",
        "while", "True", "False", "None", "import", "class",
    ),
)

JAVASCRIPT = LanguageProfile(
    id="javascript",
    display_name="JavaScript",
    output_recognizers=(_call(r"console\.log", line_start=True),),
    banner_lines=("> node {source}",),
    file_extension=".js",
    entry_point="index",
    syntax_helpers=(
        "function", "const", "let", "var", "console.log()", "return", "if",
        "else", "=>", "true", "false", "null", "import",
    ),
)

TYPESCRIPT = LanguageProfile(
    id="typescript",
    display_name="TypeScript",
    output_recognizers=(_call(r"console\.log", line_start=True),),
    banner_lines=("> tsc {source} && node {binary}.js",),
    file_extension=".ts",
    syntax_helpers=(
        "interface", "type", "const", "let", "console.log()", "return",
        "number", "string", "boolean", "any", "void",
    ),
)

JAVA = LanguageProfile(
    id="java",
    display_name="Java",
    output_recognizers=(
        _call(r"System\.out\.println"),
        _call(r"System\.out\.print"),
    ),
    banner_lines=("> javac {source}", "> java {binary}"),
    file_extension=".java",
    entry_point="Main",
    compile_delay=Config.COMPILED_COMPILE_DELAY,
    syntax_helpers=(
        "public", "class", "static", "void", "main", "System.out.println()",
        "int", "String", "new", "return", "if", "else",
    ),
)

KOTLIN = LanguageProfile(
    id="kotlin",
    display_name="Kotlin",
    output_recognizers=(
        _call(r"println", line_start=True),
        _call(r"print", line_start=True),
    ),
    banner_lines=("> kotlinc {source} -include-runtime -d {binary}.jar", "> java -jar {binary}.jar"),
    file_extension=".kt",
    entry_point="Main",
    compile_delay=Config.COMPILED_COMPILE_DELAY,
    syntax_helpers=(
        "fun", "val", "var", "println()", "class", "data class", "if", "else",
        "when", "return", "null",
    ),
)

SCALA = LanguageProfile(
    id="scala",
    display_name="Scala",
    output_recognizers=(_call(r"println", line_start=True),),
    banner_lines=("> scala-cli run {source}",),
    file_extension=".scala",
    entry_point="Main",
    compile_delay=Config.COMPILED_COMPILE_DELAY,
    syntax_helpers=("object", "def", "val", "var", "println()", "case class", "match"),
)

CSHARP = LanguageProfile(
    id="csharp",
    display_name="C#",
    output_recognizers=(
        _call(r"Console\.WriteLine"),
        _call(r"Console\.Write"),
    ),
    banner_lines=("> dotnet build", "> dotnet run"),
    file_extension=".cs",
    entry_point="Program",
    compile_delay=Config.COMPILED_COMPILE_DELAY,
    syntax_helpers=(
        "using", "System;", "class", "public", "static", "void", "Main",
        "Console.WriteLine()", "int", "string", "new",
    ),
)

CPP = LanguageProfile(
    id="cpp",
    display_name="C++",
    output_recognizers=(_stream(r"\bcout"), _call(r"\bprintf")),
    banner_lines=("> g++ -o {binary} {source}", "> ./{binary}"),
    file_extension=".cpp",
    compile_delay=Config.COMPILED_COMPILE_DELAY,
    syntax_helpers=(
        "#include", "using namespace std;", "int main()", "cout <<", "cin >>",
        "return 0;", "class", "public:", "private:", "void",
    ),
)

C = LanguageProfile(
    id="c",
    display_name="C",
    output_recognizers=(_call(r"\bprintf"), _call(r"\bputs")),
    banner_lines=("> gcc -o {binary} {source}", "> ./{binary}"),
    file_extension=".c",
    compile_delay=Config.COMPILED_COMPILE_DELAY,
    syntax_helpers=("#include <stdio.h>", "int main()", "printf()", "return 0;", "char", "int"),
)

GO = LanguageProfile(
    id="go",
    display_name="Go",
    output_recognizers=(
        _call(r"fmt\.Println"),
        _call(r"fmt\.Printf"),
        _call(r"fmt\.Print"),
    ),
    banner_lines=("> go build {source}", "> ./{binary}"),
    file_extension=".go",
    compile_delay=Config.COMPILED_COMPILE_DELAY,
    syntax_helpers=(
        "func", "package", "main", "import", "fmt.Println()", "var", "type",
        "struct", "return", "if", "else",
    ),
)

RUST = LanguageProfile(
    id="rust",
    display_name="Rust",
    output_recognizers=(_call(r"\bprintln!"), _call(r"\bprint!")),
    banner_lines=(
        "   Compiling playground v0.1.0 (/playground)",
        "    Finished dev [unoptimized + debuginfo] target(s) in 0.65s",
        "     Running `target/debug/playground`",
    ),
    file_extension=".rs",
    compile_delay=Config.COMPILED_COMPILE_DELAY,
    syntax_helpers=(
        "fn", "let", "mut", "pub", "use", "mod", "struct", "enum", "impl",
        "println!()", "match", "Option", "Result",
    ),
)

SWIFT = LanguageProfile(
    id="swift",
    display_name="Swift",
    output_recognizers=(_call(r"print", line_start=True),),
    banner_lines=("> swiftc {source} -o {binary}", "> ./{binary}"),
    file_extension=".swift",
    compile_delay=Config.COMPILED_COMPILE_DELAY,
    syntax_helpers=("func", "let", "var", "print()", "struct", "class", "guard", "if let"),
)

RUBY = LanguageProfile(
    id="ruby",
    display_name="Ruby",
    output_recognizers=(
        _call(r"puts", line_start=True),
        _statement(r"puts"),
        _statement(r"print"),
    ),
    banner_lines=("> ruby {source}",),
    file_extension=".rb",
    syntax_helpers=("def", "end", "puts", "do", "if", "elsif", "class", "nil"),
)

PHP = LanguageProfile(
    id="php",
    display_name="PHP",
    output_recognizers=(_statement(r"echo"), _call(r"\bprint")),
    banner_lines=("> php {source}",),
    file_extension=".php",
    entry_point="index",
    syntax_helpers=("<?php", "echo", "$", "function", "return", "array()", "foreach"),
)

DART = LanguageProfile(
    id="dart",
    display_name="Dart",
    output_recognizers=(_call(r"print", line_start=True),),
    banner_lines=("> dart run {source}",),
    file_extension=".dart",
    syntax_helpers=("void main()", "var", "final", "const", "print()", "String", "int"),
)

SQL = LanguageProfile(
    id="sql",
    display_name="SQL",
    output_recognizers=(),
    banner_lines=(
        "SQLite version 3.39.3 2022-09-05",
        'Enter ".help" for usage hints.',
        "sqlite> -- Executing Query",
    ),
    file_extension=".sql",
    entry_point="query",
    syntax_helpers=(
        "SELECT", "FROM", "WHERE", "INSERT INTO", "VALUES", "UPDATE", "SET",
        "DELETE", "JOIN", "ON", "GROUP BY", "ORDER BY",
    ),
    engine=Engine.SQL,
    success_markers=("found", "ok"),
    exit_trailer=False,
)

DEFAULT_PROFILE = JAVASCRIPT


# =============================================================================
# Registry
# =============================================================================

TAG_WORD_SEPARATOR = re.compile(r"[^\w#+]+")

# (profile, substring fragments, exact aliases), checked in order.
# Order matters: "typescript" and "javascript" must win over "java".
_REGISTRY = (
    (TYPESCRIPT, ("typescript",), ("ts",)),
    (JAVASCRIPT, ("script", "node"), ("js",)),
    (KOTLIN, ("kotlin",), ("kt",)),
    (SCALA, ("scala",), ()),
    (JAVA, ("java",), ()),
    (CSHARP, ("c#", "csharp", "c-sharp", "dotnet"), ("cs",)),
    (CPP, ("c++", "cpp"), ()),
    (PYTHON, ("python",), ("py",)),
    (RUST, ("rust",), ("rs",)),
    (GO, ("golang",), ("go",)),
    (SWIFT, ("swift",), ()),
    (RUBY, ("ruby",), ("rb",)),
    (PHP, ("php",), ()),
    (DART, ("dart", "flutter"), ()),
    (SQL, ("sql",), ()),
    (C, (), ("c",)),
)


def resolve_profile(language_tag: Optional[str]) -> LanguageProfile:
    """Resolve a free-form language tag to a profile.

    Matching is case-insensitive substring containment against each
    profile's fragments, plus exact matches for short aliases. When nothing
    matches, short aliases are also tried against the words of the tag
    ("Go 1.21", "ANSI C"). Unknown or empty tags resolve to the default
    profile; this never raises.

    Args:
        language_tag: Tag supplied by the exercise (e.g. "Python 3", "java")

    Returns:
        The matching LanguageProfile, or DEFAULT_PROFILE
    """
    tag = (language_tag or Config.DEFAULT_LANGUAGE or "").strip().lower()
    if not tag:
        return DEFAULT_PROFILE

    for profile, fragments, aliases in _REGISTRY:
        if tag in aliases or any(fragment in tag for fragment in fragments):
            return profile

    words = set(TAG_WORD_SEPARATOR.split(tag))
    for profile, _, aliases in _REGISTRY:
        if words.intersection(aliases):
            return profile
    return DEFAULT_PROFILE


def available_profiles() -> Tuple[LanguageProfile, ...]:
    """All registered profiles, in registry order."""
    return tuple(profile for profile, _, _ in _REGISTRY)
