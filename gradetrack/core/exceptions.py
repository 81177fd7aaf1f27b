class TrackerError(Exception):
    """Base class for every error the tracker core raises."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(TrackerError):
    """A referenced assignment or submission id does not exist."""


class InvalidGrade(TrackerError):
    """A grade outside the accepted scale."""


class InvalidInput(TrackerError):
    """A required field is empty or an edit touches a read-only field."""


class DurabilityError(TrackerError):
    """The durability layer could not load or save a blob."""
