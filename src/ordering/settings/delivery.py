"""Delivery settings aggregate: the store-wide delivery region configuration.

Exactly one record exists, under a fixed identity. Pricing never reads the
aggregate directly: ``load_delivery_config()`` hands out an immutable snapshot
that stays stable for the duration of one pricing computation.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.pricing.delivery import DEFAULT_REGION_A_KEYWORD, DeliveryRegionConfig
from ordering.settings.events import DeliverySettingsUpdated

DELIVERY_SETTINGS_ID = "delivery"

_CONFIGURABLE = (
    "enabled_region_a",
    "fee_region_a",
    "enabled_region_b",
    "fee_region_b",
    "region_a_keyword",
    "eta_region_a",
    "eta_region_b",
)


@ordering.aggregate
class DeliverySettings:
    enabled_region_a = Boolean(default=False)
    fee_region_a = Integer(default=0, min_value=0)
    enabled_region_b = Boolean(default=False)
    fee_region_b = Integer(default=0, min_value=0)
    region_a_keyword = String(max_length=100, default=DEFAULT_REGION_A_KEYWORD)
    eta_region_a = Integer(min_value=0)
    eta_region_b = Integer(min_value=0)
    updated_by = String(max_length=255)
    updated_at = DateTime()

    @classmethod
    def create(cls):
        return cls(id=DELIVERY_SETTINGS_ID)

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
            DeliverySettingsUpdated(
                settings_id=str(self.id),
                enabled_region_a=self.enabled_region_a,
                fee_region_a=self.fee_region_a,
                enabled_region_b=self.enabled_region_b,
                fee_region_b=self.fee_region_b,
                region_a_keyword=self.region_a_keyword,
                eta_region_a=self.eta_region_a,
                eta_region_b=self.eta_region_b,
                updated_by=updated_by,
                updated_at=now,
            )
        )

    def snapshot(self) -> DeliveryRegionConfig:
        return DeliveryRegionConfig(
            enabled_region_a=bool(self.enabled_region_a),
            fee_region_a=self.fee_region_a or 0,
            enabled_region_b=bool(self.enabled_region_b),
            fee_region_b=self.fee_region_b or 0,
            region_a_keyword=self.region_a_keyword or DEFAULT_REGION_A_KEYWORD,
            eta_region_a=self.eta_region_a,
            eta_region_b=self.eta_region_b,
        )


def load_delivery_config() -> DeliveryRegionConfig | None:
    """Snapshot of the delivery settings, or ``None`` when none were ever saved."""
    try:
        settings = current_domain.repository_for(DeliverySettings).get(DELIVERY_SETTINGS_ID)
    except ObjectNotFoundError:
        return None
    return settings.snapshot()
