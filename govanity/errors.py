"""Exception hierarchy for govanity.

``ConfigError`` and ``EnumerationError`` abort the run. ``ExtractionError``
and its subclasses are scoped to a single repository and are logged by the
pipeline before it moves on to the next one.
"""


class GovanityError(Exception):
    """Base class for all govanity errors."""


class ConfigError(GovanityError):
    """Missing or invalid configuration."""


class EnumerationError(GovanityError):
    """Repository discovery failed outright."""


class ExtractionError(GovanityError):
    """A single repository could not be processed."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr.strip()

    def __str__(self) -> str:
        message = super().__str__()
        if self.stderr:
            return f"{message}: {self.stderr}"
        return message


class CloneError(ExtractionError):
    """``git clone`` failed."""


class PackageListError(ExtractionError):
    """Listing packages in a working copy failed."""
