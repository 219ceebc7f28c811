"""Convert marketplace payloads into domain models."""

import re
from typing import Any, Iterable, Optional, Tuple

from loguru import logger

from ...core.enums import ServiceType
from ...models.expert import ExpertProfile, Price, ServiceOffering
from .models import ProfilePayload, ServicePayload

DEFAULT_CURRENCY = "INR"

_CURRENCY_SYMBOLS = {"₹": "INR", "$": "USD", "€": "EUR", "£": "GBP"}
_AMOUNT = re.compile(r"(\d[\d,]*(?:\.\d+)?)")


def parse_price_text(text: str, default_currency: str = DEFAULT_CURRENCY) -> Optional[Price]:
    """
    Parse a displayed price such as "FREE", "₹500" or "$1,200".

    Returns:
        Price, or None when no amount is present
    """
    cleaned = (text or "").strip()
    if not cleaned:
        return None
    if cleaned.upper() == "FREE":
        return Price(0.0, default_currency)

    currency = default_currency
    for symbol, code in _CURRENCY_SYMBOLS.items():
        if symbol in cleaned:
            currency = code
            break
    else:
        code_match = re.search(r"\b([A-Z]{3})\b", cleaned)
        if code_match:
            currency = code_match.group(1)

    amount_match = _AMOUNT.search(cleaned)
    if not amount_match:
        return None
    return Price(float(amount_match.group(1).replace(",", "")), currency)


def parse_price(charge: Any, currency: Optional[str] = None) -> Price:
    """
    Parse the ``charge`` field of a service.

    The API reports either a number, a numeric string, display text, or an
    object with ``amount``/``currency`` (or ``display``) keys. Missing values
    mean free.
    """
    default = (currency or DEFAULT_CURRENCY).upper()

    if charge is None or isinstance(charge, bool):
        return Price(0.0, default)
    if isinstance(charge, (int, float)):
        return Price(float(charge), default)
    if isinstance(charge, dict):
        nested_currency = charge.get("currency") or default
        if "amount" in charge:
            return parse_price(charge.get("amount"), nested_currency)
        return parse_price(charge.get("display"), nested_currency)
    if isinstance(charge, str):
        try:
            return Price(float(charge.replace(",", "")), default)
        except ValueError:
            parsed = parse_price_text(charge, default)
            if parsed is not None:
                return parsed
    logger.debug(f"Unrecognised charge value {charge!r}, treating as free")
    return Price(0.0, default)


def parse_service(payload: ServicePayload) -> Optional[ServiceOffering]:
    """Build a ServiceOffering; returns None for entries without an id."""
    service_id = payload.get("id")
    if service_id is None or service_id == "":
        return None

    raw_type = payload.get("type")
    duration = payload.get("duration")
    return ServiceOffering(
        service_id=str(service_id),
        title=(payload.get("title") or "").strip(),
        description=(payload.get("description") or payload.get("short_description") or "").strip(),
        price=parse_price(payload.get("charge"), payload.get("currency")),
        service_type=ServiceType.from_raw(raw_type),
        duration_minutes=int(duration) if isinstance(duration, (int, float)) else None,
        raw_type=raw_type,
    )


def _first_text(payload: ProfilePayload, keys: Iterable[str]) -> str:
    for key in keys:
        value = payload.get(key)  # type: ignore[misc]
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def _parse_services(raw: Any) -> Tuple[ServiceOffering, ...]:
    if not isinstance(raw, list):
        return ()
    services = []
    seen = set()
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        service = parse_service(entry)  # type: ignore[arg-type]
        if service is None or service.service_id in seen:
            continue
        seen.add(service.service_id)
        services.append(service)
    return tuple(services)


def parse_profile(payload: ProfilePayload, username: Optional[str] = None) -> ExpertProfile:
    """
    Build an ExpertProfile from a /fetchByUsername payload.

    Args:
        payload: Decoded JSON object
        username: Username requested, used when the payload omits it

    Raises:
        ValueError: If the payload is not a JSON object
    """
    if not isinstance(payload, dict):
        raise ValueError(f"Profile payload must be an object, got {type(payload).__name__}")

    resolved_username = _first_text(payload, ("username",)) or (username or "")
    return ExpertProfile(
        id=str(payload.get("id", "")),
        username=resolved_username,
        full_name=_first_text(payload, ("full_name", "name", "display_name")),
        headline=_first_text(payload, ("headline", "title")),
        bio=_first_text(payload, ("bio", "description")),
        timezone=_first_text(payload, ("timezone",)) or None,
        services=_parse_services(payload.get("services")),
    )
