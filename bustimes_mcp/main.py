from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
import logging
import uvicorn
from utils.logging_setup import setup_logging
from .bustimes_client import BustimesService
from .config import APP_HOST, APP_PORT, LOG_DIR, LOG_TO_FILE
from .server import create_mcp_server

setup_logging(log_dir=LOG_DIR, log_to_file=LOG_TO_FILE)
log = logging.getLogger(__name__)

service = BustimesService()
mcp = create_mcp_server(service)

sse_app = mcp.sse_app()
streamable_app = mcp.streamable_http_app()


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with mcp.session_manager.run():
        log.info(f"UK Bus Departures MCP server is running on {APP_HOST}:{APP_PORT}")
        yield


# Initialize FastAPI App
app = FastAPI(
    title = "UK Bus Departures MCP",
    description = "MCP tools for live UK bus departures scraped from bustimes.org",
    version = "1.0.0",
    lifespan = lifespan,
    docs_url = None,
    redoc_url = None,
    openapi_url = None,
)

# Only the two MCP transports are served
app.router.routes.extend(sse_app.routes)
app.router.routes.extend(streamable_app.routes)


@app.exception_handler(404)
async def not_found(request: Request, exc: Exception):
    return PlainTextResponse("Not found", status_code=404)


if __name__ == "__main__":
    uvicorn.run("bustimes_mcp.main:app", host=APP_HOST, port=APP_PORT)
