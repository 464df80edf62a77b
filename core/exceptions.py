"""Error types raised by the NeuraLink services."""


class NeuraLinkError(Exception):
    """Base class for all service errors."""


class ServiceUnavailable(NeuraLinkError):
    """A remote Gemini call failed; the message carries the upstream error."""


class MalformedResponse(NeuraLinkError):
    """The response envelope had no usable text candidate."""


class EngineNotInitialized(NeuraLinkError):
    """The local engine was used before initialize() completed."""


class StartupFailed(NeuraLinkError):
    """The local engine could not finish its startup steps."""
