# =============================================================================
# test_cli.py - kscope CLI Tests
# =============================================================================
# Tests for the kscope command-line tool, run through click's CliRunner.
#
# Test coverage includes:
#   - Status lines, stdin and interactive input
#   - --ast and --tokens output
#   - -O/--operator handling
#   - --strict exit status
# =============================================================================

from pathlib import Path

import pytest
from click.testing import CliRunner

from kaleidoscope.cli.kscope import main, parse_operators
from kaleidoscope.cli.errors import ExitCode


PROGRAM = "extern sin(x);\ndef f(x) sin(x)*2;\nf(1);\n"


@pytest.fixture
def runner():
    return CliRunner()


def write_source(text: str, name: str = "prog.ks") -> str:
    Path(name).write_text(text)
    return name


class TestStatusLines:
    """Default output: one status line per construct."""

    def test_file_input(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(main, [write_source(PROGRAM)])

            assert result.exit_code == 0, f"kscope failed: {result.output}"
            assert result.output.splitlines() == [
                "Parsed an extern",
                "Parsed a function definition.",
                "Parsed a top-level expr",
            ]

    def test_stdin_input(self, runner):
        result = runner.invoke(main, [], input="def g() 1; g();")
        assert result.exit_code == 0
        assert "Parsed a function definition." in result.output
        assert "Parsed a top-level expr" in result.output

    def test_interactive_prompts(self, runner):
        result = runner.invoke(main, ["-i"], input="1+1;\n")
        assert result.exit_code == 0
        assert "ready> " in result.output
        assert "Parsed a top-level expr" in result.output

    def test_errors_reported_and_skipped(self, runner):
        result = runner.invoke(main, [], input="def (\n1+1;")
        assert result.exit_code == 0
        assert "<stdin>:1:5: error: Expected function name in prototype" in result.output
        assert "Parsed a top-level expr" in result.output

    def test_missing_file(self, runner):
        result = runner.invoke(main, ["nope.ks"])
        assert result.exit_code == 2


class TestOutputModes:
    """--ast and --tokens."""

    def test_ast_dump(self, runner):
        result = runner.invoke(main, ["--ast"], input="def foo(a b) a+b")
        assert result.exit_code == 0
        assert "Function foo(a, b)" in result.output
        assert "  Binary '+'" in result.output

    def test_tokens(self, runner):
        result = runner.invoke(main, ["--tokens"], input="def f(x)")
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "Token(DEF, 1:1)",
            "Token(IDENTIFIER, 'f', 1:5)",
            "Token(SYMBOL, '(', 1:6)",
            "Token(IDENTIFIER, 'x', 1:7)",
            "Token(SYMBOL, ')', 1:8)",
            "Token(EOF, 1:9)",
        ]

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output


class TestOperators:
    """-O/--operator handling."""

    def test_extra_operator(self, runner):
        result = runner.invoke(main, ["--ast", "-O", "/=40"], input="1+6/3")
        assert result.exit_code == 0
        assert "Binary '/'" in result.output

    def test_operator_with_equals_sign(self):
        """rpartition lets '=' itself be installed."""
        assert parse_operators(None, None, ("==5", "%=30")) == {"=": 5, "%": 30}

    def test_malformed_operator(self, runner):
        result = runner.invoke(main, ["-O", "/40"], input="1")
        assert result.exit_code == 2

    def test_non_integer_precedence(self, runner):
        result = runner.invoke(main, ["-O", "/=high"], input="1")
        assert result.exit_code == 2

    def test_reserved_operator(self, runner):
        result = runner.invoke(main, ["-O", "(=40"], input="1")
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "Error: " in result.output
        assert "reserved" in result.output


class TestStrict:
    """--strict exit status."""

    def test_strict_with_errors(self, runner):
        result = runner.invoke(main, ["--strict"], input=") 1;")
        assert result.exit_code == ExitCode.PARSE_ERROR
        assert "1 error" in result.output

    def test_strict_clean(self, runner):
        result = runner.invoke(main, ["--strict"], input="1;")
        assert result.exit_code == ExitCode.SUCCESS

    def test_strict_reports_each_error_once(self, runner):
        result = runner.invoke(main, ["--strict"], input=") 1; )")
        assert result.exit_code == ExitCode.PARSE_ERROR
        assert result.output.count("unknown token when expecting an expression") == 2
        assert result.output.splitlines()[-1] == "2 errors"

    def test_strict_parse_failure_handled(self, runner):
        """The strict failure goes through the CLI error handler, not an internal error."""
        result = runner.invoke(main, ["--strict"], input="def (")
        assert result.exit_code == ExitCode.PARSE_ERROR
        assert "Internal error" not in result.output


class TestLargeInput:
    """Inputs that are deep or long but valid."""

    def test_long_chain_ast(self, runner):
        with runner.isolated_filesystem():
            source = write_source("+".join(["1"] * 2000) + ";\n", "sum.ks")
            result = runner.invoke(main, [source, "--ast"])

            assert result.exit_code == ExitCode.SUCCESS, f"kscope failed: {result.output}"
            assert result.output.startswith("Function <anonymous>()\n  Binary '+'\n")

    def test_deep_nesting_reported(self, runner):
        depth = 300
        result = runner.invoke(main, [], input="(" * depth + "1" + ")" * depth + ";")
        assert result.exit_code == ExitCode.SUCCESS
        assert "expression nested too deeply" in result.output
