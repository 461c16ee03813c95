"""
Geocoding of destination names through the LocationIQ search API.

Coordinates are best-effort: ``geocode`` returns None instead of raising when
no API key is configured, nothing matches, or the API keeps failing.
"""

import logging
from typing import Any, Dict, Optional, Protocol

import requests

from tripbudget.config.settings import TripBudgetConfig, get_config
from tripbudget.models.day_detail import Coordinates
from tripbudget.services.retry_handler import RetryHandler
from tripbudget.utils.logging_utils import sanitize_sensitive_data

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    """Anything that can turn a place name into coordinates."""

    def geocode(self, destination: str) -> Optional[Coordinates]:
        ...


class GeocodingService:
    """
    LocationIQ geocoding client.

    One request per lookup by default. Deployments that set MAX_RETRIES
    retry transient failures (HTTP 429, 5xx, timeouts, connection errors)
    with exponential backoff. Every failure is logged and turned into a
    None result.

    Example:
        >>> service = GeocodingService()
        >>> coords = service.geocode("Lisbon, Portugal")
        >>> coords.lat if coords else None
        Decimal('38.7077507')
    """

    def __init__(
        self,
        config: Optional[TripBudgetConfig] = None,
        retry_handler: Optional[RetryHandler] = None,
    ):
        """
        Initialize the geocoding service.

        Args:
            config: Configuration (defaults to the global configuration)
            retry_handler: Retry handler for transient HTTP errors
        """
        self.config = config or get_config()
        self.retry_handler = retry_handler or RetryHandler(
            max_retries=self.config.max_retries,
            base_delay=self.config.retry_delay,
        )

    def geocode(self, destination: str) -> Optional[Coordinates]:
        """
        Look up the coordinates of a destination.

        Args:
            destination: Free-text place name

        Returns:
            Coordinates of the best match, or None
        """
        if not destination or not destination.strip():
            return None

        if not self.config.geocoding_enabled:
            logger.debug("Geocoding skipped: LOCATIONIQ_API_KEY not configured")
            return None

        try:
            result = self.retry_handler.execute_with_retry(
                self._search, destination.strip()
            )
        except Exception as e:
            logger.warning(
                f"Geocoding failed for '{destination}': "
                f"{self.retry_handler.error_classifier.get_error_description(e)}"
            )
            return None

        if result is None:
            logger.info(f"No geocoding results for '{destination}'")
        else:
            logger.debug(f"Geocoded '{destination}' to {result.lat}, {result.lon}")
        return result

    def _search(self, destination: str) -> Optional[Coordinates]:
        params: Dict[str, Any] = {
            "key": self.config.locationiq_api_key,
            "q": destination,
            "format": "json",
            "limit": 1,
        }
        logger.debug(
            f"Geocoding request to {self.config.geocode_base_url} "
            f"with params {sanitize_sensitive_data(params)}"
        )

        response = requests.get(
            self.config.geocode_base_url,
            params=params,
            headers={"User-Agent": self.config.geocode_user_agent},
            timeout=self.config.geocode_timeout,
        )

        # LocationIQ answers 404 when nothing matches
        if response.status_code == 404:
            return None
        response.raise_for_status()

        results = response.json()
        if not results:
            return None

        best = results[0]
        return Coordinates(
            lat=best["lat"], lon=best["lon"], display_name=best.get("display_name")
        )
