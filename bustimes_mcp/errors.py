class BusTimesError(Exception):
    """Base error for anything that goes wrong while fetching departures."""


class InvalidStopCodeError(BusTimesError, ValueError):
    """Raised before any network access when a stop code is not a valid ATCO code."""

    def __init__(self, stop_code: str):
        super().__init__(f"Invalid ATCO stop code format: {stop_code}")
        self.stop_code = stop_code


class StopNotFoundError(BusTimesError):
    """bustimes.org answered 404 for the departures page."""

    def __init__(self, stop_code: str):
        super().__init__(f"Bus stop not found: {stop_code}")
        self.stop_code = stop_code


class UpstreamHTTPError(BusTimesError):
    def __init__(self, status_code: int, reason: str = ""):
        super().__init__(f"HTTP {status_code}: {reason}" if reason else f"HTTP {status_code}")
        self.status_code = status_code
