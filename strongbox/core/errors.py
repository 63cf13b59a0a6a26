"""CLI error handling with actionable hints.

Provides consistent error formatting and common error factory functions
for all strongbox CLI commands.
"""

from typing import NoReturn

import click


class StrongboxCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise StrongboxCliError(
            "Could not read 'notes.txt'",
            hint="Run 'strongbox ls' to see available files"
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present."""
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


def operation_failed_error(operation: str, path: str) -> NoReturn:
    """Raise error when a storage operation reports failure.

    Args:
        operation: Verb describing the failed operation (e.g. "read").
        path: Adapter-relative path the operation targeted.

    Raises:
        StrongboxCliError: Always raises with a permissions hint.
    """
    raise StrongboxCliError(
        f"Could not {operation} '{path}'",
        hint="Check that the path exists and that you have permission to access it",
    )


def not_found_error(path: str) -> NoReturn:
    """Raise error when a path does not exist in storage.

    Raises:
        StrongboxCliError: Always raises with a listing hint.
    """
    raise StrongboxCliError(
        f"No such file or directory: '{path}'",
        hint="Run 'strongbox ls --recursive' to see what is stored",
    )
