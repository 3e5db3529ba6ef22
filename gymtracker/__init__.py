"""GymTracker API: NFC-driven workout logging backend."""

__version__ = "0.1.0"
