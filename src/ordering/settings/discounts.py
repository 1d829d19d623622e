"""Discount settings aggregate: the standard and family discount programs.

Like delivery settings, a single record under a fixed identity, read by pricing
through an immutable ``DiscountConfig`` snapshot.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Float, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.pricing.discounts import DiscountConfig
from ordering.settings.events import DiscountSettingsUpdated

DISCOUNT_SETTINGS_ID = "discounts"

_CONFIGURABLE = (
    "standard_enabled",
    "standard_code",
    "standard_percent",
    "family_enabled",
    "family_code",
    "family_percent",
)


@ordering.aggregate
class DiscountSettings:
    standard_enabled = Boolean(default=False)
    standard_code = String(max_length=100)
    standard_percent = Float(default=0.0, min_value=0.0, max_value=100.0)
    family_enabled = Boolean(default=False)
    family_code = String(max_length=100)
    family_percent = Float(default=0.0, min_value=0.0, max_value=100.0)
    updated_by = String(max_length=255)
    updated_at = DateTime()

    @classmethod
    def create(cls):
        return cls(id=DISCOUNT_SETTINGS_ID)

    def configure(self, updated_by, **changes):
        """Apply the given changes; ``None`` values leave a setting untouched."""
        for name in _CONFIGURABLE:
            value = changes.get(name)
            if value is not None:
                setattr(self, name, value)

        now = datetime.now(UTC)
        self.updated_by = updated_by
        self.updated_at = now

        self.raise_(
            DiscountSettingsUpdated(
                settings_id=str(self.id),
                standard_enabled=self.standard_enabled,
                standard_code=self.standard_code,
                standard_percent=self.standard_percent,
                family_enabled=self.family_enabled,
                family_code=self.family_code,
                family_percent=self.family_percent,
                updated_by=updated_by,
                updated_at=now,
            )
        )

    def snapshot(self) -> DiscountConfig:
        return DiscountConfig(
            standard_enabled=bool(self.standard_enabled),
            standard_code=self.standard_code or "",
            standard_percent=self.standard_percent or 0.0,
            family_enabled=bool(self.family_enabled),
            family_code=self.family_code or "",
            family_percent=self.family_percent or 0.0,
        )


def load_discount_config() -> DiscountConfig | None:
    """Snapshot of the discount settings, or ``None`` when none were ever saved."""
    try:
        settings = current_domain.repository_for(DiscountSettings).get(DISCOUNT_SETTINGS_ID)
    except ObjectNotFoundError:
        return None
    return settings.snapshot()
