"""Exceptions raised by the sync engine and its collaborators."""


class MacroDashboardError(Exception):
    """Base class for dashboard errors."""


class FetchError(MacroDashboardError):
    """Upstream API unreachable or returned an unusable response."""


class MissingSeriesMetadataError(MacroDashboardError):
    """Registry entry has no record in the metadata file."""


class MissingReferenceDataError(MacroDashboardError):
    """No reference dates available to interpolate onto."""
