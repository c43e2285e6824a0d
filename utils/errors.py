class AttendXError(Exception):
    """Base class for errors surfaced to the user as a message."""


class ValidationError(AttendXError):
    pass


class InvalidImageError(ValidationError):
    pass


class AIFlowError(AttendXError):
    """The generative-AI call failed or returned nothing usable."""
