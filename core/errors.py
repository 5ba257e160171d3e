"""Exception hierarchy for Elgato light control.

Resolution and discovery errors are fatal for an invocation. LightError
subclasses describe a failure talking to one light and are collected per
light by the dispatcher rather than aborting the other lights.
"""

from models.light import LightIdentity


class ElgatoLightError(Exception):
    """Base class for all errors raised by this package."""


class DiscoveryError(ElgatoLightError):
    """mDNS discovery failed (transport or socket error)."""


class DiscoveryUnavailableError(DiscoveryError):
    """Auto-discovery cannot run here; an explicit address is required."""


class ResolutionError(ElgatoLightError):
    """No target lights could be resolved for this invocation."""


class NoLightFoundError(ResolutionError):
    def __init__(self, message: str = "no light found"):
        super().__init__(message)


class NoLightMatchedError(ResolutionError):
    """The --light filter matched none of the known lights."""

    def __init__(self, name_filter: str, suggestions: list[str] | None = None):
        self.name_filter = name_filter
        self.suggestions = suggestions or []
        message = f"no light matched name '{name_filter}'"
        if self.suggestions:
            message += f" (did you mean: {', '.join(self.suggestions)}?)"
        super().__init__(message)


class LightError(ElgatoLightError):
    """A request to a single light failed."""

    def __init__(self, light: LightIdentity, message: str):
        self.light = light
        super().__init__(message)


class UnreachableError(LightError):
    """The light did not respond (connection refused, timeout, no route)."""


class ProtocolError(LightError):
    """The light responded with something we could not understand."""
