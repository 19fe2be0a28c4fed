"""Failures the recommendation flow reports to the routing layer."""
from __future__ import annotations


class RideWizardError(Exception):
    """Base class for errors raised by the recommendation flow."""


class ConfigurationError(RideWizardError):
    """The caller asked for a park or land that is not configured."""


class UpstreamDataError(RideWizardError):
    """Provider data could not be fetched or did not have the expected shape.

    ``str(exc)`` is safe to show to end users; ``detail`` holds the diagnostic
    that should only be logged.
    """

    public_message = "Recommendation data unavailable."

    def __init__(self, detail: str = "") -> None:
        super().__init__(self.public_message)
        self.detail = detail
