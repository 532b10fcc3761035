"""Target quantity sizing implementations."""

from .base import QuantitySizer
from .floor import FloorSizer
from .tracking_error import TrackingErrorSizer

__all__ = [
    "QuantitySizer",
    "FloorSizer",
    "TrackingErrorSizer",
]
