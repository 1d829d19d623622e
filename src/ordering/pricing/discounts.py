"""Discount code resolution against the standard and family programs."""

from dataclasses import dataclass
from enum import Enum


class DiscountKind(Enum):
    STANDARD = "standard"
    FAMILY = "family"


@dataclass(frozen=True)
class DiscountConfig:
    standard_enabled: bool = False
    standard_code: str = ""
    standard_percent: float = 0.0
    family_enabled: bool = False
    family_code: str = ""
    family_percent: float = 0.0


@dataclass(frozen=True)
class AppliedDiscount:
    code: str
    percent: float
    kind: DiscountKind


@dataclass(frozen=True)
class DiscountRejected:
    reason: str


EMPTY_CODE = "empty code"
INVALID_CODE = "invalid code"


def _normalize(code) -> str:
    return (code or "").strip().lower()


def resolve_discount(submitted_code: str, config: DiscountConfig | None) -> AppliedDiscount | DiscountRejected:
    code = _normalize(submitted_code)
    if not code:
        return DiscountRejected(reason=EMPTY_CODE)
    if config is None:
        return DiscountRejected(reason=INVALID_CODE)

    if config.standard_enabled and code == _normalize(config.standard_code):
        return AppliedDiscount(code=config.standard_code.strip(), percent=config.standard_percent, kind=DiscountKind.STANDARD)
    if config.family_enabled and code == _normalize(config.family_code):
        return AppliedDiscount(code=config.family_code.strip(), percent=config.family_percent, kind=DiscountKind.FAMILY)
    return DiscountRejected(reason=INVALID_CODE)
