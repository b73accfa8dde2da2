class SqliteBuildError(Exception):
    """Base class for errors raised by sqlitebuilder."""


class ConfigurationError(SqliteBuildError):
    """An option is missing, unknown or cannot be parsed."""


class ToolchainError(SqliteBuildError):
    """The C compiler could not be run or reported a failure."""

    def __init__(self, message, returncode=None, stderr=""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class DefineConflictError(SqliteBuildError):
    """Two define layers tried to set the same preprocessor symbol."""


class BuildOutputError(SqliteBuildError):
    """The build output was written more than once."""
