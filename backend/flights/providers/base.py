from typing import NamedTuple


class ProviderError(Exception):
    def __init__(self, message, status_code=502, details=None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details or {}


class CredentialsMissing(ProviderError):
    """A required provider credential is not configured."""


class UpstreamAuthError(ProviderError):
    """The token endpoint refused to issue a bearer token."""


class UpstreamRequestError(ProviderError):
    """The provider reported an error or answered with something other than JSON."""


class TransportError(ProviderError):
    """The request never completed (DNS, TLS, connection reset, timeout)."""


class Direction(NamedTuple):
    departure: str
    arrival: str | None = None

    @property
    def label(self) -> str:
        return f"{self.departure}-{self.arrival}"


class FlightProvider:
    def authenticate(self):
        """Return a bearer token, or None when the provider needs no auth step."""
        return None

    def directions(self, origin: str, destination: str) -> list[Direction]:
        return [Direction(origin, destination), Direction(destination, origin)]

    def fetch(self, direction: Direction, departure_date: str, token=None) -> list[dict]:
        raise NotImplementedError

    def normalize(self, raw: dict, direction: Direction, departure_date: str) -> dict | None:
        raise NotImplementedError

    def search_flights(self, origin: str, destination: str, departure_date: str) -> list[dict]:
        """
        Returns normalized flight records for every direction, unsorted.

        Authentication happens once, before the first fetch. A failure on any
        direction aborts the whole search.
        """
        token = self.authenticate()

        records = []
        for direction in self.directions(origin, destination):
            for raw in self.fetch(direction, departure_date, token=token):
                if not isinstance(raw, dict):
                    continue
                record = self.normalize(raw, direction, departure_date)
                if record is not None:
                    records.append(record)
        return records
