"""Region-gated delivery fees.

The store delivers to one named region (matched by keyword against the free-text
city) and optionally to everywhere else. A resolved fee of ``0`` means delivery
is unavailable; it is indistinguishable from a region configured with a zero
fee, and callers treat both the same way.
"""

from dataclasses import dataclass

DELIVERY_UNAVAILABLE = 0
DEFAULT_REGION_A_KEYWORD = "galway"


@dataclass(frozen=True)
class DeliveryRegionConfig:
    enabled_region_a: bool = False
    fee_region_a: int = 0
    enabled_region_b: bool = False
    fee_region_b: int = 0
    region_a_keyword: str = DEFAULT_REGION_A_KEYWORD
    eta_region_a: int | None = None
    eta_region_b: int | None = None


def _region(city: str, config: DeliveryRegionConfig | None) -> str | None:
    if config is None:
        return None
    if config.region_a_keyword.lower() in (city or "").lower() and config.enabled_region_a:
        return "a"
    if config.enabled_region_b:
        return "b"
    return None


def resolve_fee(city: str, config: DeliveryRegionConfig | None) -> int:
    region = _region(city, config)
    if region == "a":
        return config.fee_region_a
    if region == "b":
        return config.fee_region_b
    return DELIVERY_UNAVAILABLE


def estimate_delivery_minutes(city: str, config: DeliveryRegionConfig | None) -> int | None:
    """Estimated delivery time of the region ``resolve_fee`` picks, if configured.

    ``None`` whenever the resolved fee means delivery is unavailable.
    """
    if not is_deliverable(resolve_fee(city, config)):
        return None
    region = _region(city, config)
    if region == "a":
        return config.eta_region_a
    if region == "b":
        return config.eta_region_b
    return None


def is_deliverable(fee: int) -> bool:
    return fee != DELIVERY_UNAVAILABLE
