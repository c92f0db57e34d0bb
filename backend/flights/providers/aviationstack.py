import logging

from django.conf import settings

from flights.providers.base import CredentialsMissing, Direction, FlightProvider
from flights.providers.http import DEFAULT_TIMEOUT, request_json
from flights.services.normalize import normalize_status_record

logger = logging.getLogger(__name__)

AVIATIONSTACK_BASE_URL = "https://api.aviationstack.com/v1"
DEFAULT_LIMIT = 100


class AviationstackProvider(FlightProvider):
    """Flight status lookup keyed by an ``access_key`` query parameter.

    With ``match_directions`` the provider queries both legs of the route and
    keeps only records whose airports match the requested pair. Without it the
    provider acts as a departures board for the origin airport.
    """

    def __init__(
        self,
        api_key,
        base_url=AVIATIONSTACK_BASE_URL,
        limit=DEFAULT_LIMIT,
        match_directions=True,
        timeout=DEFAULT_TIMEOUT,
    ):
        if not api_key:
            raise CredentialsMissing("Missing aviationstack API key")
        self.api_key = api_key
        self.base_url = (base_url or AVIATIONSTACK_BASE_URL).rstrip("/")
        self.limit = limit
        self.match_directions = match_directions
        self.timeout = timeout

    @classmethod
    def from_settings(cls):
        return cls(
            getattr(settings, "AVIATIONSTACK_API_KEY", None),
            base_url=getattr(settings, "AVIATIONSTACK_BASE_URL", AVIATIONSTACK_BASE_URL),
            limit=getattr(settings, "AVIATIONSTACK_LIMIT", DEFAULT_LIMIT),
            match_directions=getattr(settings, "AVIATIONSTACK_MATCH_DIRECTIONS", True),
            timeout=getattr(settings, "FLIGHTS_HTTP_TIMEOUT", DEFAULT_TIMEOUT),
        )

    def fetch_flights(self, dep_iata: str, arr_iata: str | None = None, limit: int | None = None) -> list[dict]:
        query = {"access_key": self.api_key, "dep_iata": dep_iata}
        if arr_iata:
            query["arr_iata"] = arr_iata
        query["limit"] = limit or self.limit

        payload = request_json("GET", self.base_url + "/flights", params=query, timeout=self.timeout)
        flights = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(flights, list):
            return []
        logger.info("aviationstack returned %s flights for %s-%s", len(flights), dep_iata, arr_iata or "*")
        return flights

    def directions(self, origin, destination):
        if self.match_directions:
            return super().directions(origin, destination)
        return [Direction(origin)]

    def fetch(self, direction, departure_date, token=None):
        return self.fetch_flights(direction.departure, direction.arrival)

    def normalize(self, raw, direction, departure_date):
        match_direction = direction if self.match_directions else None
        return normalize_status_record(raw, match_direction)
