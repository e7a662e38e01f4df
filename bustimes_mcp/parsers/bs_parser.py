from typing import List, Optional
from bs4 import BeautifulSoup, Tag
from ..schemas import Departure, DeparturesResponse, current_timestamp
import re
import logging
from ..config import BUSTIMES_DOMAIN

log = logging.getLogger(__name__)

UNKNOWN_STOP = "Unknown Stop"

# Tried in order, the page layout has changed over time
STOP_NAME_SELECTORS = [
    'h1',
    '.stop-name',
    '[data-stop-name]',
    '.breadcrumbs li:last-child',
    'title',
]

DEPARTURE_ROW_SELECTOR = 'tbody tr, .departures-table tr, .timetable tr'

TIME_PATTERN = re.compile(r'[0-9]{1,2}:[0-9]{2}')
WHITESPACE = re.compile(r'\s+')


class BeautifulSoupParser:
    """
    Implements the DeparturesParser interface using BeautifulSoup
    selectors over the bustimes.org departures page.
    """

    def __init__(self, features: str = 'lxml', site_domain: str = BUSTIMES_DOMAIN):
        self.features = features
        self.site_domain = site_domain

    def parse(self, html_content: str, stop_code: str) -> DeparturesResponse:
        """
        Parses the departures page into a DeparturesResponse.

        Rows that are missing a service number or destination are dropped,
        and a row that blows up while parsing is logged and skipped so one
        odd row never loses the whole board.
        """
        soup = BeautifulSoup(html_content, self.features)

        stop_name = self._extract_stop_name(soup)
        departures: List[Departure] = []

        for idx, row in enumerate(soup.select(DEPARTURE_ROW_SELECTOR)):
            try:
                departure = self._parse_row(row)
                if departure:
                    departures.append(departure)
            except Exception as e:
                log.warning(f"Failed to parse departure row {idx} for {stop_code}: {e}")
                continue

        log.debug(f"Parsed {len(departures)} departures for {stop_code} ('{stop_name}')")

        return DeparturesResponse(
            departures=departures,
            stop_name=stop_name,
            stop_code=stop_code,
            last_updated=current_timestamp(),
        )

    # Helpers

    def _extract_stop_name(self, soup: BeautifulSoup) -> str:
        """Returns the first usable stop name from the known page locations."""
        for selector in STOP_NAME_SELECTORS:
            element = soup.select_one(selector)
            if element is None:
                continue

            text = element.get_text().strip() or str(element.get('data-stop-name') or element.get('content') or '').strip()
            if text and self.site_domain not in text:
                return self._clean_stop_name(text)

        return UNKNOWN_STOP

    @staticmethod
    def _clean_stop_name(text: str) -> str:
        name = WHITESPACE.sub(' ', text)
        name = re.sub(r'^Stop\s+', '', name, flags=re.IGNORECASE)
        name = re.sub(r'\s+departures$', '', name, flags=re.IGNORECASE)
        return name.strip()

    def _parse_row(self, row: Tag) -> Optional[Departure]:
        """
        Table layout is either
            [Service] [Destination] [Scheduled]
        or
            [Service] [Destination] [Scheduled] [Expected]
        """
        cells = row.find_all(['td', 'th'], recursive=False)
        if len(cells) < 3:
            return None

        service_number = self._cell_text(cells[0])
        if not service_number:
            return None

        destination = self._parse_destination(cells[1])
        if not destination:
            return None

        scheduled_text = self._cell_text(cells[2])
        expected_text = self._cell_text(cells[3]) if len(cells) >= 4 else ''

        return Departure(
            service_number=service_number,
            destination=destination,
            scheduled_time=self._parse_time(scheduled_text),
            expected_time=self._parse_time(expected_text),
        )

    @staticmethod
    def _cell_text(cell: Tag) -> str:
        """Link text if the cell has a non-empty link, otherwise the cell text."""
        link = cell.find('a')
        text = link.get_text() if link else ''
        return (text or cell.get_text() or '').strip()

    @staticmethod
    def _parse_destination(cell: Tag) -> str:
        destination = cell.get_text() or ''

        # Drop the vehicle details (fleet number, livery) shown under the destination
        vehicle = cell.select_one('.vehicle')
        if vehicle:
            vehicle_text = vehicle.get_text()
            if vehicle_text:
                destination = destination.replace(vehicle_text, '', 1).strip()

        return WHITESPACE.sub(' ', destination).strip()

    @staticmethod
    def _parse_time(time_str: str) -> Optional[str]:
        """Passes H:MM / HH:MM through as shown on the board, anything else is None."""
        if not time_str or time_str == '-':
            return None

        if TIME_PATTERN.fullmatch(time_str):
            return time_str

        return None
