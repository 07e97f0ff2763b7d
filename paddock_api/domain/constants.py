"""
GeoJSON and paddock domain constants.

This module contains the property-name tables, defaults and limits used by the
ingestion pipeline. Centralizing these values keeps the loose input naming
conventions in one declarative place.
"""


class GeoJSONLimits:
    """Hard limits applied to incoming GeoJSON."""

    # Resource protection bound; not configurable per call
    MAX_FEATURES = 10_000

    MIN_RING_POSITIONS = 4

    MIN_LONGITUDE = -180.0
    MAX_LONGITUDE = 180.0
    MIN_LATITUDE = -90.0
    MAX_LATITUDE = 90.0


class PropertyKeys:
    """Ordered candidate property names for each canonical paddock field."""

    ID = ("id", "paddockId")
    NAME = ("name", "paddock_name")
    OWNER = ("owner",)
    PROJECT = ("Project__Name", "project_name")
    AREA_ACRES = ("area_acres",)
    AREA_HECTARES = ("area_hectares",)


class PaddockDefaults:
    """Fallback values for canonical fields missing from the input."""

    NAME = "Unnamed Paddock"
    OWNER = "Unknown Owner"
    PROJECT = "Unknown Project"

    SYNTHETIC_ID_TEMPLATE = "paddock_{index}_{timestamp}"


class ProjectPalette:
    """Fixed palette used to color projects on the map."""

    COLORS = (
        "#3B82F6",  # Blue
        "#EF4444",  # Red
        "#10B981",  # Green
        "#F59E0B",  # Amber
        "#8B5CF6",  # Purple
        "#EC4899",  # Pink
        "#06B6D4",  # Cyan
        "#84CC16",  # Lime
        "#F97316",  # Orange
        "#6366F1",  # Indigo
        "#14B8A6",  # Teal
        "#F43F5E",  # Rose
    )

    @classmethod
    def color_for(cls, position: int) -> str:
        """
        Get the palette color for a position in creation order.

        Args:
            position: Zero-based position of the project

        Returns:
            Hex color string, cycling through the palette
        """
        return cls.COLORS[position % len(cls.COLORS)]


SQUARE_METERS_PER_HECTARE = 10_000.0
