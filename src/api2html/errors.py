"""Error taxonomy shared by the CLI, the pipeline and the HTTP API."""

from __future__ import annotations


class Api2HtmlError(RuntimeError):
    """Base error carrying a stable machine readable code."""

    exit_code = 1

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class UsageError(Api2HtmlError):
    """Missing or surplus command line arguments."""

    exit_code = 2


class InputError(Api2HtmlError):
    """The source document could not be read or parsed."""


class CollaboratorError(Api2HtmlError):
    """Conversion to Markdown or rendering to HTML failed."""


class OutputError(Api2HtmlError):
    """The rendered page could not be written."""


class InvalidConfigurationError(Api2HtmlError):
    """Options or configuration values that cannot be honoured."""


__all__ = [
    "Api2HtmlError",
    "UsageError",
    "InputError",
    "CollaboratorError",
    "OutputError",
    "InvalidConfigurationError",
]
