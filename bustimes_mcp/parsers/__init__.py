import logging
from ..config import HTML_PARSER_BACKEND
from .base import DeparturesParser
from .bs_parser import BeautifulSoupParser

log = logging.getLogger(__name__)

# html.parser nests cells when optional end tags are left out, which breaks row parsing
SUPPORTED_BACKENDS = ("lxml",)

_parser_instance: DeparturesParser = None # type: ignore

def get_parser() -> DeparturesParser:
    """
    Factory function to get the configured departures parser instance.

    Reads HTML_PARSER_BACKEND from config and returns a singleton
    BeautifulSoupParser built on that tree builder.
    """

    global _parser_instance

    if _parser_instance is not None:
        return _parser_instance

    backend = resolve_backend(HTML_PARSER_BACKEND)
    log.info(f"Initializing BeautifulSoupParser with '{backend}' backend.")
    _parser_instance = BeautifulSoupParser(features=backend)

    return _parser_instance


def resolve_backend(name: str) -> str:
    if name in SUPPORTED_BACKENDS:
        return name
    log.error(f"Invalid HTML_PARSER_BACKEND: '{name}'. Defaulting to 'lxml'.")
    return "lxml"


__all__ = ["DeparturesParser", "BeautifulSoupParser", "get_parser", "resolve_backend"]
