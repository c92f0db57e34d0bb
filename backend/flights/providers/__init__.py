from django.conf import settings

from flights.providers.amadeus import AmadeusProvider
from flights.providers.aviationstack import AviationstackProvider
from flights.providers.base import ProviderError


def get_flight_provider():
    """Return the configured flight provider instance."""

    raw_name = getattr(settings, "FLIGHTS_PROVIDER", None) or "amadeus"
    provider_name = str(raw_name).strip().lower()

    aliases = {
        "amadeus": "amadeus",
        "offers": "amadeus",
        "aviationstack": "aviationstack",
        "aviation-stack": "aviationstack",
        "status": "aviationstack",
    }

    provider_name = aliases.get(provider_name, provider_name)

    if provider_name == "amadeus":
        return AmadeusProvider.from_settings()

    if provider_name == "aviationstack":
        return AviationstackProvider.from_settings()

    raise ProviderError(f"Unknown flights provider: {provider_name}", status_code=500)
