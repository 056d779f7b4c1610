class PipelineConfigError(ValueError):
    """Raised when the error pipeline is configured twice or with an invalid target."""

class NotificationDispatchError(Exception):
    """Raised when delivery to a channel fails."""
