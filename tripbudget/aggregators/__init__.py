"""Aggregators that combine trip data into itinerary views."""

from tripbudget.aggregators.itinerary_aggregator import (
    ItineraryAggregator,
    ItineraryDay,
    MapLocation,
)

__all__ = ["ItineraryAggregator", "ItineraryDay", "MapLocation"]
