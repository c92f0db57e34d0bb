from datetime import datetime, timezone
from functools import cmp_to_key

from django.conf import settings

SEARCH_LINK_TEMPLATE = "https://www.kayak.com/flights/{origin}-{destination}/{date}?sort=bestflight_a"


def _record(**fields) -> dict:
    record = {
        "flightNumber": "",
        "origin": "",
        "destination": "",
        "departureTime": "",
        "arrivalTime": "",
        "priceFrom": None,
        "currency": "",
        "bookUrl": "",
        "direction": "",
        "days": [],
    }
    record.update(fields)
    return record


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _parse_price(value) -> float | None:
    if not value:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def build_search_link(origin, destination, date) -> str:
    if not origin or not destination or not date:
        return ""
    return SEARCH_LINK_TEMPLATE.format(origin=origin, destination=destination, date=date)


def normalize_offer_record(raw_offer: dict, direction, departure_date: str) -> dict | None:
    """Map one flight-offers search entry onto the flat record shape.

    Multi-leg itineraries collapse to their outer endpoints: the first segment
    supplies departure data and the last segment of the same itinerary supplies
    arrival data. Offers without itineraries or segments are dropped.
    """
    itineraries = raw_offer.get("itineraries")
    if not isinstance(itineraries, list) or not itineraries:
        return None

    segments = _as_dict(itineraries[0]).get("segments")
    if not isinstance(segments, list) or not segments:
        return None

    first_segment = _as_dict(segments[0])
    last_segment = _as_dict(segments[-1])
    departure = _as_dict(first_segment.get("departure"))
    arrival = _as_dict(last_segment.get("arrival"))

    carrier_code = first_segment.get("carrierCode") or ""
    number = first_segment.get("number")
    flight_number = f"{carrier_code}{number}" if number else carrier_code

    price = _as_dict(raw_offer.get("price"))
    origin = departure.get("iataCode") or direction.departure
    destination = arrival.get("iataCode") or direction.arrival

    return _record(
        flightNumber=flight_number,
        origin=origin,
        destination=destination,
        departureTime=departure.get("at") or "",
        arrivalTime=arrival.get("at") or "",
        priceFrom=_parse_price(price.get("total")),
        currency=price.get("currency") or getattr(settings, "DEFAULT_CURRENCY", "USD"),
        bookUrl=build_search_link(origin, destination, departure_date),
    )


def normalize_status_record(raw_flight: dict, match_direction=None) -> dict | None:
    flight = _as_dict(raw_flight.get("flight"))
    departure = _as_dict(raw_flight.get("departure"))
    arrival = _as_dict(raw_flight.get("arrival"))

    flight_number = flight.get("iata") or flight.get("number") or ""
    origin = departure.get("iata") or departure.get("airport") or ""
    destination = arrival.get("iata") or arrival.get("airport") or ""

    direction_label = ""
    if match_direction is not None:
        origin = str(origin).upper()
        destination = str(destination).upper()
        # Route filters upstream are loose; keep only the exact requested pair.
        if origin != match_direction.departure or destination != match_direction.arrival:
            return None
        direction_label = match_direction.label

    return _record(
        flightNumber=str(flight_number),
        origin=origin,
        destination=destination,
        departureTime=departure.get("scheduled") or departure.get("estimated") or "",
        arrivalTime=arrival.get("scheduled") or arrival.get("estimated") or "",
        direction=direction_label,
    )


def _parse_time(value) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _compare_departures(a: dict, b: dict) -> int:
    left = _parse_time(a.get("departureTime"))
    right = _parse_time(b.get("departureTime"))
    if left is None or right is None:
        return 0
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def sort_by_departure(records: list[dict]) -> list[dict]:
    """Stable ascending sort on departureTime.

    A record without a parseable time compares equal to everything, so it can
    also keep timed neighbours from being reordered across it:
    [10:00, "", 09:00] comes back unchanged.
    """
    return sorted(records, key=cmp_to_key(_compare_departures))
