"""Exception hierarchy shared by the dispatcher and its collaborators."""


class AdminToolError(Exception):
    """Base class for errors surfaced to the user with a category."""

    category = 'AdminToolError'

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def describe(self) -> str:
        """Return ``<category>: <message>`` for printing on stderr."""
        return f'{self.category}: {self.message}'


class ConfigError(AdminToolError):
    """Raised when the properties source cannot be read or parsed."""

    category = 'ConfigError'


class ArgumentParsingError(AdminToolError):
    """Raised for unknown or malformed command-line arguments."""

    category = 'ArgumentError'


class GlobalFlagsError(ArgumentParsingError):
    """Raised for unknown or malformed global flags."""


class NoCommandError(AdminToolError):
    """Raised when no registered command token is present."""

    category = 'NoCommandError'


class ClientConstructionError(AdminToolError):
    """Raised when the admin client cannot be built."""

    category = 'ClientConstructionError'


class HandlerConstructionError(AdminToolError):
    """Raised when a command handler factory fails.

    ``cause`` holds the innermost exception of the failure chain, which is
    what gets reported to the user.
    """

    category = 'HandlerConstructionError'

    def __init__(self, command: str, cause: BaseException) -> None:
        super().__init__(f'{type(cause).__name__}: {cause}')
        self.command = command
        self.cause = cause


class AdminApiError(AdminToolError):
    """Raised by the admin client when a request fails."""

    category = 'AdminApiError'

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LocalRunError(AdminToolError):
    """Raised when an in-process run cannot be set up."""

    category = 'LocalRunError'


class CommandRegistrationError(ValueError):
    """Raised when a command name or alias collides at registration time."""


def innermost_cause(exc: BaseException) -> BaseException:
    """Follow the explicit ``__cause__`` chain to its innermost exception."""
    seen = {id(exc)}
    current = exc
    while current.__cause__ is not None and id(current.__cause__) not in seen:
        current = current.__cause__
        seen.add(id(current))
    return current
