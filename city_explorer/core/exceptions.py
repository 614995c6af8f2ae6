"""
Error types raised by the maps loader and lookup facade.
Each lookup error carries the provider status that caused it, when there is one.
"""
from typing import Optional


class MapsError(Exception):
    """Base exception for everything that goes wrong talking to the maps provider."""

    def __init__(self, message: str, status: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status:
            return f"{self.message} (status: {self.status})"
        return self.message


class LoadError(MapsError):
    """The provider bootstrap script could not be loaded (network, missing or rejected key)."""


class GeocodeError(MapsError):
    """A city name did not resolve to a coordinate."""


class SearchError(MapsError):
    """Nearby search returned a non-success status."""


class DetailError(MapsError):
    """Place details could not be fetched, usually an unknown place id."""


class AutocompleteError(MapsError):
    """Autocomplete returned a non-success status other than ZERO_RESULTS."""


class StaleResultError(MapsError):
    """A result belongs to a city view that has since been replaced."""

    def __init__(self, generation: int, current: int):
        super().__init__(f"Result for generation {generation} discarded, current is {current}")
        self.generation = generation
        self.current = current
