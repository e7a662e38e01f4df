from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
import json
import re


def current_timestamp() -> str:
    """ISO-8601 UTC timestamp used for `last_updated`."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class Departure(BaseModel):
    """Output model representing a single departure row from the stop's departures board."""

    service_number: str = Field(default=..., min_length=1, description="Bus service number (e.g., '29', 'X1').")
    destination: str = Field(default=..., min_length=1, description="Destination description (e.g., 'City Centre').")
    scheduled_time: Optional[str] = Field(default=None, description="Scheduled departure time in HH:MM format.")
    expected_time: Optional[str] = Field(default=None, description="Expected (live) departure time in HH:MM format.")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "service_number": "29",
                    "destination": "City Centre",
                    "scheduled_time": "14:32",
                    "expected_time": "14:35"
                }
            ]
        }
    }


class StopMetadata(BaseModel):
    """Stop details as returned by the bustimes.org stops API."""

    atco_code: str
    naptan_code: str
    common_name: str
    name: str
    long_name: str
    location: List[float] = Field(default=..., min_length=2, max_length=2, description="[longitude, latitude]")
    indicator: Optional[str]
    bearing: Optional[str]
    stop_type: str
    bus_stop_type: str
    active: bool

    # Wrong types mean the stops API changed shape, never coerce them
    model_config = ConfigDict(strict=True)


class DeparturesResponse(BaseModel):
    """
    Final output model for a departures lookup: the parsed departures plus the
    resolved stop name and, when the stops API answered, the stop's location.
    """

    departures: List[Departure] = Field(default_factory=list, description="Departures in board order.")
    stop_name: str = Field(default=..., description="Name of the bus stop.")
    stop_code: str = Field(default=..., description="ATCO code of the bus stop.")
    location: Optional[List[float]] = Field(default=None, min_length=2, max_length=2, description="Longitude and latitude.")
    last_updated: str = Field(default_factory=current_timestamp, description="When the data was last updated in ISO format.")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "departures": [
                        {
                            "service_number": "29",
                            "destination": "City Centre",
                            "scheduled_time": "14:32",
                            "expected_time": None
                        }
                    ],
                    "stop_name": "Broad Street (Stop BS4)",
                    "stop_code": "0100BRP90023",
                    "location": [-2.5879, 51.4545],
                    "last_updated": "2025-11-09T14:30:00.000000Z"
                }
            ]
        }
    }

    def to_json(self, indent: int = 2) -> str:
        """Serialises the response, leaving `location` out entirely when unknown."""
        data = self.model_dump(mode="json")
        if self.location is None:
            data.pop("location")
        return json.dumps(data, indent=indent)


class DeparturesRequest(BaseModel):
    """Input model for the departures tool."""

    stop_code: str = Field(default=..., description="UK bus stop ATCO code (e.g., '0100BRP90023' or '010000037').")
    date: Optional[str] = Field(default=None, description="Optional date in YYYY-MM-DD format (must be provided with time).")
    time: Optional[str] = Field(default=None, description="Optional time in HH:MM format (must be provided with date).")

    @field_validator('date')
    @classmethod
    def validate_date_format(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            datetime.strptime(v, '%Y-%m-%d')
        return v

    @field_validator('time')
    @classmethod
    def validate_time_format(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not re.fullmatch(r'([01]\d|2[0-3]):[0-5]\d', v):
            raise ValueError('time must be in HH:MM 24-hour format')
        return v

    @model_validator(mode='after')
    def date_and_time_together(self) -> "DeparturesRequest":
        if (self.date is None) != (self.time is None):
            raise ValueError('Both date and time must be provided together, or neither should be provided')
        return self


class StopSummary(BaseModel):
    """Subset of the stops API payload echoed back by the validation tool, unvalidated."""

    name: Optional[Any] = None
    common_name: Optional[Any] = None
    long_name: Optional[Any] = None
    location: Optional[Any] = None
    indicator: Optional[Any] = None
    bearing: Optional[Any] = None
    active: Optional[Any] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "StopSummary":
        return cls(**{field: payload.get(field) for field in cls.model_fields})


class StopValidationResult(BaseModel):
    """Output model of the ATCO code validation tool."""

    stop_code: str
    is_valid: bool
    metadata: Optional[StopSummary] = None
    metadata_error: Optional[str] = None

    def to_json(self, indent: int = 2) -> str:
        data = self.model_dump(mode="json")
        for key in ("metadata", "metadata_error"):
            if data[key] is None:
                data.pop(key)
        return json.dumps(data, indent=indent)
