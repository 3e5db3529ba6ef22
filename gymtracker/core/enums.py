"""Shared enums for models and API."""

from enum import Enum


class PRType(str, Enum):
    """Measured quantity a personal record tracks."""

    WEIGHT = "weight"  # Heaviest weight lifted
