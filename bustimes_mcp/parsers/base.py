from typing import Protocol
from ..schemas import DeparturesResponse

class DeparturesParser(Protocol):
    """
    Defines the standard interface for a departures page parser.

    Any class that implements this protocol must provide a `parse` method
    that takes the (already sanitised) HTML of a bustimes.org departures page
    and returns a DeparturesResponse.
    """

    def parse(self, html_content: str, stop_code: str) -> DeparturesResponse:
        """
        Parses the raw HTML of a stop's departures page.

        Args:
            html_content: The HTML string of the departures page.
            stop_code: The ATCO code the page was requested for, echoed
                       back in the response.

        Returns:
            A DeparturesResponse with departures in page order, the stop
            name found on the page and a fresh `last_updated` timestamp.
        """
        ...
