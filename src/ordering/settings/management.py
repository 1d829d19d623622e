"""Store settings management: commands and handlers.

Only administrators may change the delivery or discount settings. The first
update creates the singleton record.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.errors import PermissionDenied
from ordering.settings.delivery import DELIVERY_SETTINGS_ID, DeliverySettings
from ordering.settings.discounts import DISCOUNT_SETTINGS_ID, DiscountSettings

logger = structlog.get_logger(__name__)


@ordering.command(part_of="DeliverySettings")
class UpdateDeliverySettings:
    """Change the delivery regions; omitted fields keep their current value."""

    actor_id = Identifier(required=True)
    actor_is_admin = Boolean(default=False)
    enabled_region_a = Boolean()
    fee_region_a = Integer(min_value=0)
    enabled_region_b = Boolean()
    fee_region_b = Integer(min_value=0)
    region_a_keyword = String(max_length=100)
    eta_region_a = Integer(min_value=0)
    eta_region_b = Integer(min_value=0)


@ordering.command(part_of="DiscountSettings")
class UpdateDiscountSettings:
    """Change the discount programs; omitted fields keep their current value."""

    actor_id = Identifier(required=True)
    actor_is_admin = Boolean(default=False)
    standard_enabled = Boolean()
    standard_code = String(max_length=100)
    standard_percent = Float(min_value=0.0, max_value=100.0)
    family_enabled = Boolean()
    family_code = String(max_length=100)
    family_percent = Float(min_value=0.0, max_value=100.0)


def _require_admin(command):
    if not command.actor_is_admin:
        raise PermissionDenied("Only administrators can change store settings")


@ordering.command_handler(part_of=DeliverySettings)
class ManageDeliverySettingsHandler:
    @handle(UpdateDeliverySettings)
    def update_delivery_settings(self, command):
        _require_admin(command)
        repo = current_domain.repository_for(DeliverySettings)
        try:
            settings = repo.get(DELIVERY_SETTINGS_ID)
        except ObjectNotFoundError:
            settings = DeliverySettings.create()

        settings.configure(
            updated_by=str(command.actor_id),
            enabled_region_a=command.enabled_region_a,
            fee_region_a=command.fee_region_a,
            enabled_region_b=command.enabled_region_b,
            fee_region_b=command.fee_region_b,
            region_a_keyword=command.region_a_keyword,
            eta_region_a=command.eta_region_a,
            eta_region_b=command.eta_region_b,
        )
        repo.add(settings)
        logger.info("Delivery settings updated", updated_by=str(command.actor_id))


@ordering.command_handler(part_of=DiscountSettings)
class ManageDiscountSettingsHandler:
    @handle(UpdateDiscountSettings)
    def update_discount_settings(self, command):
        _require_admin(command)
        repo = current_domain.repository_for(DiscountSettings)
        try:
            settings = repo.get(DISCOUNT_SETTINGS_ID)
        except ObjectNotFoundError:
            settings = DiscountSettings.create()

        settings.configure(
            updated_by=str(command.actor_id),
            standard_enabled=command.standard_enabled,
            standard_code=command.standard_code,
            standard_percent=command.standard_percent,
            family_enabled=command.family_enabled,
            family_code=command.family_code,
            family_percent=command.family_percent,
        )
        repo.add(settings)
        logger.info("Discount settings updated", updated_by=str(command.actor_id))
