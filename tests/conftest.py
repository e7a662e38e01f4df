"""Shared fixtures: sample bustimes.org pages and a service wired to a fake upstream."""

import os

# Keep test runs from writing log files; must happen before config is imported
os.environ.setdefault("LOG_TO_FILE", "false")

from typing import Callable, Dict, List, Optional

import httpx
import pytest

from bustimes_mcp.bustimes_client import BustimesService
from bustimes_mcp.parsers.bs_parser import BeautifulSoupParser
from utils.rate_limiter import RateLimiter
from utils.response_cache import ResponseCache

STOP_CODE = "0100BRP90023"

STOP_METADATA = {
    "atco_code": STOP_CODE,
    "naptan_code": "bstgwpa",
    "common_name": "Broad Street",
    "name": "Broad Street (BS4)",
    "long_name": "Bristol Broad Street (BS4)",
    "location": [-2.5937, 51.4556],
    "indicator": "BS4",
    "bearing": "N",
    "stop_type": "BCT",
    "bus_stop_type": "MKD",
    "active": True,
}

DEPARTURES_HTML = """
<html>
<head><title>Broad Street (BS4) - bustimes.org</title></head>
<body>
<ul class="breadcrumbs"><li><a href="/">Home</a></li><li>Broad Street (BS4)</li></ul>
<h1>Stop Broad Street (BS4) departures</h1>
<table>
<thead><tr><th>Service</th><th>To</th><th>Scheduled</th><th>Expected</th></tr></thead>
<tbody>
<tr>
    <td><a href="/services/29-bristol">29</a></td>
    <td>City Centre
        <div class="vehicle">4321 - WX12 ABC</div>
    </td>
    <td><a href="/trips/1">14:32</a></td>
    <td>14:35</td>
</tr>
<tr>
    <td><a href="/services/x1">X1</a></td>
    <td>Weston-super-Mare</td>
    <td>14:40</td>
</tr>
</tbody>
</table>
</body>
</html>
"""


class FakeBustimes:
    """Routes httpx requests to canned bustimes.org answers and records them."""

    def __init__(
        self,
        metadata: Optional[dict] = None,
        metadata_status: int = 200,
        html: str = DEPARTURES_HTML,
        departures_status: int = 200,
    ):
        self.metadata = STOP_METADATA if metadata is None else metadata
        self.metadata_status = metadata_status
        self.html = html
        self.departures_status = departures_status
        self.requests: List[httpx.Request] = []
        self.overrides: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        for prefix, handler in self.overrides.items():
            if path.startswith(prefix):
                return handler(request)

        if path.startswith("/api/stops/"):
            return httpx.Response(self.metadata_status, json=self.metadata)
        if path.endswith("/departures"):
            return httpx.Response(self.departures_status, text=self.html)
        return httpx.Response(404, text="Not found")

    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def fake_bustimes() -> FakeBustimes:
    return FakeBustimes()


@pytest.fixture
def make_service(fake_bustimes: FakeBustimes) -> Callable[..., BustimesService]:
    def _make(upstream: Optional[FakeBustimes] = None, **kwargs) -> BustimesService:
        upstream = upstream or fake_bustimes
        kwargs.setdefault("rate_limiter", RateLimiter(0))
        kwargs.setdefault("metadata_cache", ResponseCache(300))
        kwargs.setdefault("parser", BeautifulSoupParser())
        return BustimesService(
            base_url="https://bustimes.org",
            transport=upstream.transport(),
            **kwargs,
        )

    return _make
