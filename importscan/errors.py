"""Exception types raised by the import scanner."""


class ImportScanError(Exception):
    """Base class for all import scanning errors."""


class NotFoundError(ImportScanError, FileNotFoundError):
    """A file or directory that was explicitly asked for does not exist."""


class TargetNotFoundError(NotFoundError):
    """The target file or directory could not be found."""


class ReadError(ImportScanError):
    """A file exists but its content could not be read."""


class ParseConfigError(ImportScanError):
    """An import map or tsconfig file is not valid JSON of the expected shape."""


class InvalidTargetError(ImportScanError):
    """The target exists but is the wrong kind (file vs. directory)."""
