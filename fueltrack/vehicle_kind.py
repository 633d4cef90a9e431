"""VehicleKind enum for the supported vehicle classes."""

from enum import Enum


class VehicleKind(Enum):
    """Two-wheeler or four-wheeler. Values match the stored field."""

    BIKE = "bike"
    CAR = "car"

    @property
    def label(self) -> str:
        return "Two-wheeler" if self is VehicleKind.BIKE else "Four-wheeler"
