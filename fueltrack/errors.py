"""Exceptions raised by fuel tracking operations."""


class FuelTrackError(Exception):
    """Base class for every error the tracker reports to its caller."""


class InvalidAmount(FuelTrackError):
    """A numeric input failed a sanity bound."""


class NonMonotonicOdometer(FuelTrackError):
    """A new odometer reading is behind the previous one."""


class InvalidVehicle(FuelTrackError):
    """A vehicle registration failed validation."""


class Unauthenticated(FuelTrackError):
    """No user is signed in."""


class VehicleNotFound(FuelTrackError):
    """No vehicle with the given id belongs to the current user."""


class StoreError(FuelTrackError):
    """The underlying store failed to read or write."""


class InvalidEntry(FuelTrackError):
    """A maintenance record or problem report failed validation."""


class EntryNotFound(FuelTrackError):
    """No maintenance record or problem with the given id belongs to the user."""
