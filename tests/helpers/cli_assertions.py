"""Assertions for CliRunner results.

Failures print the exit code, a slice of the output and the exception
so a broken CLI test can be diagnosed without rerunning it.
"""

import re

from click.testing import Result

OUTPUT_PREVIEW = 500


def _describe(result: Result) -> str:
    return (
        f"  exit code: {result.exit_code}\n"
        f"  output: {result.output[:OUTPUT_PREVIEW]!r}\n"
        f"  exception: {result.exception!r}"
    )


def assert_command_success(result: Result, *, context: str = "") -> None:
    """Assert the command exited with status 0."""
    label = f" [{context}]" if context else ""
    assert result.exit_code == 0, f"command failed{label}\n{_describe(result)}"


def assert_command_failed(result: Result, *, expected_code: int = 1, context: str = "") -> None:
    """Assert the command exited with expected_code.

    Click reports usage errors (bad option values) with 2 and
    ClickException subclasses with 1.
    """
    label = f" [{context}]" if context else ""
    assert result.exit_code == expected_code, (
        f"expected exit code {expected_code}{label}\n{_describe(result)}"
    )


def assert_output_matches(result: Result, pattern: str, *, flags: int = 0) -> re.Match[str]:
    """Assert pattern is found in the output and return the match."""
    match = re.search(pattern, result.output, flags)
    assert match is not None, f"pattern {pattern!r} not in output\n{_describe(result)}"
    return match


def assert_error_message(result: Result, *, hint: str | None = None) -> None:
    """Assert the output carries an "Error:" line and, if given, a hint containing hint."""
    assert_output_matches(result, r"^Error: ", flags=re.MULTILINE)
    if hint is not None:
        hint_line = assert_output_matches(result, r"^Hint: .*$", flags=re.MULTILINE).group(0)
        assert hint in hint_line, f"hint {hint!r} not in {hint_line!r}"
