"""FRED API client with rate limiting."""

import logging
import time
from datetime import date

import httpx

from macro_dashboard.config import Settings
from macro_dashboard.errors import FetchError
from macro_dashboard.models import Observation


logger = logging.getLogger(__name__)

# FRED marks unpublished observations with a dot
MISSING_VALUE = "."


class FredClient:
    """Fetches observations from the FRED API.

    One instance is created per process and handed to the synchronizer; the
    time of the last request lives on the instance so consecutive calls are
    spaced at least ``settings.rate_limit_delay`` seconds apart.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.settings.validate()
        self._transport = transport
        self._client: httpx.Client | None = None
        self._last_request_time: float = 0.0

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.settings.request_timeout, transport=self._transport
            )
        return self._client

    def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "FredClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _wait_for_rate_limit(self) -> None:
        elapsed = time.monotonic() - self._last_request_time
        if elapsed < self.settings.rate_limit_delay:
            time.sleep(self.settings.rate_limit_delay - elapsed)
        self._last_request_time = time.monotonic()

    def fetch_observations(
        self, source_id: str, start_date: date, end_date: date | None = None
    ) -> list[Observation]:
        """
        Fetch observations for a series.

        Args:
            source_id: FRED series ID
            start_date: First date to include
            end_date: Last date to include (open-ended if None)

        Returns:
            Observations in the order FRED returns them (ascending), with
            missing-value markers removed

        Raises:
            FetchError: On transport failure, non-success status or a
                payload without observations
        """
        self._wait_for_rate_limit()

        params = {
            "series_id": source_id,
            "api_key": self.settings.fred_api_key,
            "file_type": "json",
            "observation_start": start_date.isoformat(),
        }
        if end_date:
            params["observation_end"] = end_date.isoformat()

        try:
            response = self.client.get(
                f"{self.settings.fred_base_url}/series/observations",
                params=params,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"FRED API error for {source_id}: {e.response.status_code} "
                f"{e.response.reason_phrase}"
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Request for {source_id} failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"Malformed response for {source_id}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("observations"), list):
            raise FetchError(f"Malformed response for {source_id}: no observations")

        observations = []
        for point in data["observations"]:
            raw_value = point.get("value")
            if raw_value is None or raw_value == MISSING_VALUE:
                continue
            try:
                observations.append(
                    Observation(
                        date=date.fromisoformat(point["date"]),
                        value=float(raw_value),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                raise FetchError(f"Malformed observation for {source_id}: {point!r}") from e

        logger.debug(f"  {source_id}: {len(observations)} observations")
        return observations
