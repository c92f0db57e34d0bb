import logging

from django.conf import settings

from flights.providers.base import CredentialsMissing, FlightProvider, UpstreamAuthError
from flights.providers.http import DEFAULT_TIMEOUT, request_json
from flights.services.normalize import normalize_offer_record

logger = logging.getLogger(__name__)

# Sandbox host; use https://api.amadeus.com for production keys.
AMADEUS_BASE_URL = "https://test.api.amadeus.com"
TOKEN_PATH = "/v1/security/oauth2/token"
FLIGHT_OFFERS_PATH = "/v2/shopping/flight-offers"

MAX_OFFERS = 10


class AmadeusProvider(FlightProvider):
    """Flight offers search behind an OAuth client-credentials grant."""

    def __init__(self, client_id, client_secret, base_url=AMADEUS_BASE_URL, timeout=DEFAULT_TIMEOUT):
        if not client_id or not client_secret:
            raise CredentialsMissing("Missing Amadeus API credentials")
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = (base_url or AMADEUS_BASE_URL).rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls):
        return cls(
            getattr(settings, "AMADEUS_API_KEY", None),
            getattr(settings, "AMADEUS_API_SECRET", None),
            base_url=getattr(settings, "AMADEUS_BASE_URL", AMADEUS_BASE_URL),
            timeout=getattr(settings, "FLIGHTS_HTTP_TIMEOUT", DEFAULT_TIMEOUT),
        )

    def authenticate(self) -> str:
        payload = request_json(
            "POST",
            self.base_url + TOKEN_PATH,
            data={
                "grant_type": "client_credentials",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            error_class=UpstreamAuthError,
            timeout=self.timeout,
        )
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise UpstreamAuthError("Amadeus token response did not include an access token.", status_code=502)
        return token

    def search_offers(self, token: str, origin: str, destination: str, departure_date: str) -> list[dict]:
        payload = request_json(
            "GET",
            self.base_url + FLIGHT_OFFERS_PATH,
            params={
                "originLocationCode": origin,
                "destinationLocationCode": destination,
                "departureDate": departure_date,
                "adults": "1",
                "currencyCode": "USD",
                "max": str(MAX_OFFERS),
            },
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.timeout,
        )
        offers = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(offers, list):
            return []
        logger.info("Amadeus returned %s offers for %s-%s on %s", len(offers), origin, destination, departure_date)
        return offers

    def fetch(self, direction, departure_date, token=None):
        return self.search_offers(token, direction.departure, direction.arrival, departure_date)

    def normalize(self, raw, direction, departure_date):
        return normalize_offer_record(raw, direction, departure_date)
