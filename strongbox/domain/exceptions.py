"""Domain exceptions for strongbox.

These exceptions represent contract violations rather than ordinary OS
failures. Ordinary failures (missing file, permission denied, disk full)
are reported by adapter operations as False / None results and never
raised; the exceptions below are raised.
"""


class StrongboxDomainError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class RootNotReadableError(StrongboxDomainError):
    """Raised when the adapter root cannot be created or read."""

    def __init__(self, root: str) -> None:
        super().__init__(
            f"The root path {root} is not readable.",
            hint="Check that the directory exists and that you can list it",
        )
        self.root = root


class UnsupportedLinkError(StrongboxDomainError):
    """Raised when a symbolic link is met while links are disallowed.

    Attributes:
        path: Absolute location of the offending link.
    """

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Links are not supported, encountered link at {path}",
            hint="Construct the adapter with LinkPolicy.SKIP_LINKS to ignore links",
        )
        self.path = path


class PathOutsideRootError(StrongboxDomainError):
    """Raised when a relative path would resolve outside the adapter root."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Path '{path}' is outside of the storage root",
            hint="Use a path relative to the root without climbing above it",
        )
        self.path = path


class InvalidVisibilityError(StrongboxDomainError, ValueError):
    """Raised when a visibility value is neither 'public' nor 'private'."""

    def __init__(self, value: str) -> None:
        super().__init__(
            f"Invalid visibility '{value}'",
            hint="Use 'public' or 'private'",
        )
        self.value = value
