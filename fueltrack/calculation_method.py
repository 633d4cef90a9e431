"""CalculationMethod enum recording how the mileage estimate was last set."""

from enum import Enum


class CalculationMethod(Enum):
    """Source of the current mileage figure."""

    MANUAL = "manual"  # Entered at registration
    FULL_TO_FULL = "full_to_full"
    RESERVE_TO_RESERVE = "reserve_to_reserve"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()
