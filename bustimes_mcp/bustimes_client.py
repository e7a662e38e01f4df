import httpx
import asyncio
import logging
from typing import Any, Dict, Optional

from .config import USER_AGENT, RATE_LIMIT_INTERVAL_SEC, METADATA_CACHE_TTL_SEC, HTTP_TIMEOUT_SEC, BUSTIMES_BASE_URL
from .errors import BusTimesError, InvalidStopCodeError, StopNotFoundError, UpstreamHTTPError
from .schemas import DeparturesResponse, StopMetadata, StopSummary, StopValidationResult
from .stop_codes import validate_atco_code, build_departures_url, build_metadata_url
from .parsers import get_parser
from .parsers.base import DeparturesParser
from .parsers.bs_parser import UNKNOWN_STOP
from utils.clean_html import sanitize_html
from utils.rate_limiter import RateLimiter
from utils.response_cache import ResponseCache

log = logging.getLogger(__name__)

JSON_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'application/json',
}

HTML_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
    'Accept-Language': 'en-GB,en;q=0.5',
}


class BustimesService:
    """
    Fetches live departures for a stop from bustimes.org.

    Every outbound call goes through the service's rate limiter, and stop
    metadata from the stops API is kept in a TTL cache. Both are instance
    state so separate services never share pacing or cached data.
    """

    def __init__(
        self,
        rate_limiter: Optional[RateLimiter] = None,
        metadata_cache: Optional[ResponseCache] = None,
        parser: Optional[DeparturesParser] = None,
        base_url: str = BUSTIMES_BASE_URL,
        timeout: float = HTTP_TIMEOUT_SEC,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter(RATE_LIMIT_INTERVAL_SEC)
        self.metadata_cache = metadata_cache if metadata_cache is not None else ResponseCache(METADATA_CACHE_TTL_SEC)
        self.parser = parser if parser is not None else get_parser()
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport, follow_redirects=True)

    # Departures

    async def get_bus_departures(
        self,
        stop_code: str,
        date: Optional[str] = None,
        time: Optional[str] = None
    ) -> DeparturesResponse:
        """
        Returns the departures board for `stop_code`, merged with the stop's
        metadata when the stops API has it.

        Raises InvalidStopCodeError without touching the network for a bad code,
        StopNotFoundError / UpstreamHTTPError for a failed departures page, and
        BusTimesError for anything unexpected.
        """
        if not validate_atco_code(stop_code):
            raise InvalidStopCodeError(stop_code)

        await self.rate_limiter.wait_if_needed()

        try:
            async with self._client() as client:
                stop_metadata, departures_html = await asyncio.gather(
                    self.get_stop_metadata(client, stop_code),
                    self.fetch_departures_html(client, stop_code, date, time),
                )

            departures = self.parser.parse(departures_html, stop_code)

            stop_name = UNKNOWN_STOP
            location = None
            if stop_metadata is not None:
                stop_name = stop_metadata.long_name or stop_metadata.name or stop_metadata.common_name or UNKNOWN_STOP
                location = stop_metadata.location

            log.info(f"Found {len(departures.departures)} departures for {stop_code} ('{stop_name}')")

            return departures.model_copy(update={"stop_name": stop_name, "location": location})

        except BusTimesError as e:
            log.error(f"Error fetching departures for {stop_code}: {e}")
            raise
        except Exception as e:
            log.error(f"Unexpected error fetching departures for {stop_code}: {e}", exc_info=True)
            raise BusTimesError(f"Failed to fetch bus departures: {e}") from e

    async def fetch_departures_html(
        self,
        client: httpx.AsyncClient,
        stop_code: str,
        date: Optional[str] = None,
        time: Optional[str] = None
    ) -> str:
        """Downloads the departures page and strips active content from it."""
        url = build_departures_url(stop_code, date, time, base_url=self.base_url)
        log.info(f"Fetching departures from: {url}")

        response = await client.get(url, headers=HTML_HEADERS)

        if response.status_code == 404:
            raise StopNotFoundError(stop_code)
        if not response.is_success:
            raise UpstreamHTTPError(response.status_code, response.reason_phrase)

        return sanitize_html(response.text)

    # Stop metadata

    async def get_stop_metadata(self, client: httpx.AsyncClient, stop_code: str) -> Optional[StopMetadata]:
        """
        Returns the stop's metadata from cache or the stops API.

        Metadata is a nice-to-have: any failure is logged and reported as None
        so the departures lookup carries on without it.
        """
        cache_key = f"metadata-{stop_code}"
        cached = self.metadata_cache.get(cache_key)
        if cached is not None:
            log.debug(f"Stop metadata cache hit for {stop_code}")
            return cached

        url = build_metadata_url(stop_code, base_url=self.base_url)
        log.info(f"Fetching stop metadata from: {url}")

        try:
            response = await client.get(url, headers=JSON_HEADERS)

            if not response.is_success:
                log.warning(f"Failed to fetch stop metadata for {stop_code}: HTTP {response.status_code}")
                return None

            metadata = StopMetadata.model_validate(response.json())
        except Exception as e:
            log.warning(f"Error fetching stop metadata for {stop_code}: {e}")
            return None

        self.metadata_cache.set(cache_key, metadata)
        return metadata

    async def inspect_stop(self, stop_code: str) -> StopValidationResult:
        """
        Validates an ATCO code and, when it is well formed, looks the stop up
        on the stops API. Lookup failures are reported in `metadata_error`
        rather than raised.
        """
        result = StopValidationResult(stop_code=stop_code, is_valid=validate_atco_code(stop_code))
        if not result.is_valid:
            return result

        await self.rate_limiter.wait_if_needed()

        url = build_metadata_url(stop_code, base_url=self.base_url)
        log.info(f"Validating stop {stop_code} against: {url}")

        try:
            async with self._client() as client:
                response = await client.get(url, headers=JSON_HEADERS)

            if response.is_success:
                payload = response.json()
                if isinstance(payload, dict):
                    result.metadata = StopSummary.from_payload(payload)
                else:
                    log.warning(f"Stops API returned {type(payload).__name__} for {stop_code}, expected an object")
                    result.metadata_error = "Unexpected metadata format (expected a JSON object)"
            else:
                result.metadata_error = f"Stop not found (HTTP {response.status_code})"
        except Exception as e:
            log.warning(f"Failed to fetch metadata for {stop_code}: {e}")
            result.metadata_error = f"Failed to fetch metadata: {e}"

        return result

    # Cache management

    def clear_cache(self) -> None:
        self.metadata_cache.clear()

    def get_cache_info(self) -> Dict[str, Any]:
        return self.metadata_cache.info()
