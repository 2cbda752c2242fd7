"""Exception types shared by the services and the HTTP layer."""


class VoiceCounterError(Exception):
    """Base class for every error raised by this service."""


class ConfigurationError(VoiceCounterError):
    """A required setting is missing; the process cannot start."""


class ValidationError(VoiceCounterError):
    """An inbound request is malformed."""


class RemoteServiceError(VoiceCounterError):
    """Logging in to Discord or renaming the channel failed."""


class PersistenceError(VoiceCounterError):
    """The counter file could not be written."""
