"""Exception types raised by auto-swagger."""


class AutoSwaggerError(Exception):
    """Base class for all auto-swagger errors."""


class ConfigError(AutoSwaggerError):
    """The service descriptor could not be loaded or is malformed."""


class TypeDefinitionError(AutoSwaggerError):
    """A type definition source could not be converted."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)


class DocumentError(AutoSwaggerError):
    """The Swagger document builder was used out of order."""
