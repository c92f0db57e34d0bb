import logging

import requests

from flights.providers.base import TransportError, UpstreamRequestError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 25


def _error_field(payload):
    """Return the upstream error value, or None when the payload reports none.

    Empty containers still count as an error; only null, empty-string, zero
    and false values are ignored.
    """
    if not isinstance(payload, dict):
        return None
    for key in ("error", "errors"):
        value = payload.get(key)
        if value is None or value is False or value == "" or value == 0:
            continue
        return value
    return None


def request_json(
    method: str,
    url: str,
    *,
    params: dict | None = None,
    data: dict | None = None,
    headers: dict | None = None,
    error_class=UpstreamRequestError,
    timeout: int = DEFAULT_TIMEOUT,
) -> dict:
    """Issue one request and return the parsed JSON body.

    Both upstreams report failures inside a 200 response, so a top-level
    ``error`` or ``errors`` field fails the call regardless of status.
    """
    try:
        response = requests.request(
            method,
            url,
            params=params,
            data=data,
            headers=headers,
            timeout=timeout,
        )
    except requests.RequestException as exc:
        logger.warning("Upstream request failed", extra={"url": url, "details": str(exc)})
        raise TransportError(
            f"Upstream request failed: {exc}",
            status_code=502,
            details={"error": str(exc)},
        )

    try:
        payload = response.json()
    except ValueError:
        logger.warning(
            "Upstream response was not valid JSON",
            extra={"url": url, "status_code": response.status_code},
        )
        raise error_class(
            "Upstream response was not valid JSON.",
            status_code=502,
            details={"error": response.text},
        )

    error = _error_field(payload)
    if error is not None:
        logger.warning(
            "Upstream API error",
            extra={"url": url, "status_code": response.status_code, "details": error},
        )
        raise error_class(f"Upstream API error: {error}", status_code=502, details={"error": error})

    if response.status_code >= 400:
        logger.warning(
            "Upstream error response",
            extra={"url": url, "status_code": response.status_code, "details": payload},
        )
        raise error_class(
            f"Upstream returned HTTP {response.status_code}.",
            status_code=response.status_code,
            details=payload if isinstance(payload, dict) else {"error": payload},
        )

    return payload
