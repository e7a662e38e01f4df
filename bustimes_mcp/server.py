import logging
from typing import Annotated, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field, ValidationError

from .bustimes_client import BustimesService
from .config import APP_HOST, APP_PORT
from .schemas import DeparturesRequest

log = logging.getLogger(__name__)

SERVER_NAME = "UK Bus Departures"


async def get_bus_departures(
    service: BustimesService,
    stop_code: str,
    date: Optional[str] = None,
    time: Optional[str] = None
) -> str:
    """
    Looks up live departures and returns them as pretty-printed JSON.

    Every failure, bad input included, is raised as a ToolError so the
    MCP client receives an error result instead of a crashed call.
    """
    try:
        request = DeparturesRequest(stop_code=stop_code, date=date, time=time)
        departures = await service.get_bus_departures(request.stop_code, request.date, request.time)
    except ValidationError as e:
        message = "; ".join(err["msg"] for err in e.errors())
        raise ToolError(f"Error fetching bus departures: {message}") from e
    except Exception as e:
        raise ToolError(f"Error fetching bus departures: {e}") from e

    return departures.to_json()


async def validate_atco_code(service: BustimesService, stop_code: str) -> str:
    """Checks the code's format and echoes back what the stops API knows about it."""
    result = await service.inspect_stop(stop_code)
    return result.to_json()


def register_bus_tools(mcp: FastMCP, service: BustimesService) -> None:
    """Registers the departures tools on `mcp`, bound to `service`."""

    @mcp.tool(
        name="get_bus_departures",
        description="Get live departures for a UK bus stop from bustimes.org.",
    )
    async def _get_bus_departures(
        stop_code: Annotated[str, Field(description="UK bus stop ATCO code (e.g., '0100BRP90023')")],
        date: Annotated[Optional[str], Field(description="Optional date in YYYY-MM-DD format (must be provided with time)")] = None,
        time: Annotated[Optional[str], Field(description="Optional time in HH:MM format (must be provided with date)")] = None,
    ) -> str:
        return await get_bus_departures(service, stop_code, date, time)

    @mcp.tool(
        name="validate_atco_code",
        description="Validate an ATCO stop code and fetch the stop's metadata if it exists.",
    )
    async def _validate_atco_code(
        stop_code: Annotated[str, Field(description="ATCO code to validate")],
    ) -> str:
        return await validate_atco_code(service, stop_code)

    log.info("Registered bus departure tools.")


def create_mcp_server(service: BustimesService) -> FastMCP:
    """
    Builds the MCP server. SSE lives under /sse (client messages on
    /sse/message/) and streamable HTTP under /mcp.
    """
    mcp = FastMCP(
        SERVER_NAME,
        host=APP_HOST,
        port=APP_PORT,
        sse_path="/sse",
        message_path="/sse/message/",
        streamable_http_path="/mcp",
    )
    register_bus_tools(mcp, service)
    return mcp
