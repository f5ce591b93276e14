"""
Exception types raised by the export pipeline.
"""


class ExportError(Exception):
    """Base class for failures that abort an export run."""

    pass


class ConfigError(ExportError, ValueError):
    """Raised when a configuration section is missing or invalid."""

    pass


class ExtractionError(ExportError):
    """Raised when a feature extractor fails on a record."""

    def __init__(self, extractor: str, record_key: str, cause: BaseException):
        self.extractor = extractor
        self.record_key = record_key
        self.cause = cause
        super().__init__(
            f"Extractor '{extractor}' failed on record '{record_key}': "
            f"{type(cause).__name__}: {cause}"
        )


class SnapshotError(ExportError):
    """Raised when records cannot be assembled into a snapshot."""

    pass


class ExportWriteError(ExportError):
    """Raised when the output directory or file cannot be written."""

    pass


class CollectError(ExportError):
    """Raised when generator output cannot be collected into the output tree."""

    pass
