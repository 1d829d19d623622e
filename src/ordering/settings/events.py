"""Domain events for the store settings singletons."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="DeliverySettings")
class DeliverySettingsUpdated:
    """An administrator changed the delivery regions or their fees.

    Carries the full configuration after the change, so consumers never need to
    read the aggregate back.
    """

    __version__ = 1

    settings_id = Identifier(required=True)
    enabled_region_a = Boolean(required=True)
    fee_region_a = Integer(required=True)
    enabled_region_b = Boolean(required=True)
    fee_region_b = Integer(required=True)
    region_a_keyword = String(required=True)
    eta_region_a = Integer()
    eta_region_b = Integer()
    updated_by = String(required=True)
    updated_at = DateTime(required=True)


@ordering.event(part_of="DiscountSettings")
class DiscountSettingsUpdated:
    """An administrator changed the standard or family discount programs."""

    __version__ = 1

    settings_id = Identifier(required=True)
    standard_enabled = Boolean(required=True)
    standard_code = String()
    standard_percent = Float(required=True)
    family_enabled = Boolean(required=True)
    family_code = String()
    family_percent = Float(required=True)
    updated_by = String(required=True)
    updated_at = DateTime(required=True)
