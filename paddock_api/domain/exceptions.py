"""
Domain exceptions.

Structural GeoJSON errors abort a whole upload and are raised. Per-feature
problems are reported as data on the batch result instead.
"""


class GeoJSONStructureError(ValueError):
    """Base class for batch-fatal GeoJSON structure errors."""

    error_code = "INVALID_GEOJSON"


class InvalidJSONError(GeoJSONStructureError):
    """Raised when the upload body cannot be parsed as JSON."""

    error_code = "INVALID_JSON"


class NotAnObjectError(GeoJSONStructureError):
    """Raised when the parsed document is not a JSON object."""

    error_code = "NOT_AN_OBJECT"


class UnknownTypeError(GeoJSONStructureError):
    """Raised when the document type is neither Feature nor FeatureCollection."""

    error_code = "UNKNOWN_TYPE"


class FeaturesNotArrayError(GeoJSONStructureError):
    """Raised when a FeatureCollection's features member is not an array."""

    error_code = "FEATURES_NOT_ARRAY"


class EmptyFeaturesError(GeoJSONStructureError):
    """Raised when a FeatureCollection has no features."""

    error_code = "EMPTY_FEATURES"


class TooManyFeaturesError(GeoJSONStructureError):
    """Raised when a FeatureCollection exceeds the feature cap."""

    error_code = "TOO_MANY_FEATURES"


class PaddockNotFoundError(LookupError):
    """Raised when a stored paddock cannot be found."""
    pass


class ProjectNotFoundError(LookupError):
    """Raised when a project has no statistics (and therefore no paddocks)."""
    pass
