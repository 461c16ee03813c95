"""Trip budget core: trips, day numbering, lodging bookings and itineraries."""

__version__ = "1.0.0"
