import os
from dotenv import load_dotenv
from typing import Literal
from urllib.parse import urlparse

load_dotenv()

# "production" in your deployment environment
APP_ENV: str = os.getenv("APP_ENV", "development")

LOG_DIR: str = os.getenv("LOG_DIR", "logs")
LOG_TO_FILE: bool = os.getenv("LOG_TO_FILE", "true").strip().lower() in {"1", "true", "yes", "on"}

BUSTIMES_BASE_URL: str = os.getenv("BUSTIMES_BASE_URL", "https://bustimes.org").rstrip("/")
BUSTIMES_DOMAIN: str = urlparse(BUSTIMES_BASE_URL).hostname or "bustimes.org"

USER_AGENT: str = os.getenv("USER_AGENT", "MCP-BusTimes-Server/1.0 (+https://github.com/user/bustimes-mcp)")

# Minimum spacing between outbound requests to bustimes.org
RATE_LIMIT_INTERVAL_SEC: float = float(os.getenv("RATE_LIMIT_INTERVAL_SEC", "2.0"))
METADATA_CACHE_TTL_SEC: float = float(os.getenv("METADATA_CACHE_TTL_SEC", "300"))
HTTP_TIMEOUT_SEC: float = float(os.getenv("HTTP_TIMEOUT_SEC", "30.0"))

HtmlParserBackend = Literal["lxml"]
HTML_PARSER_BACKEND: HtmlParserBackend = os.getenv("HTML_PARSER_BACKEND", "lxml") # type: ignore

APP_HOST: str = os.getenv("APP_HOST", "localhost")
APP_PORT: int = int(os.getenv("APP_PORT", "9000"))
