from __future__ import annotations

import logging

from utiltrack.models.property import Property
from utiltrack.models.tariff import TariffConfiguration
from utiltrack.repositories.base import PropertyRepository, TariffRepository

logger = logging.getLogger(__name__)


class PropertyService:
    def __init__(self, repo: PropertyRepository, tariff_repo: TariffRepository) -> None:
        self.repo = repo
        self.tariff_repo = tariff_repo

    def create_property(self, owner_id: int, name: str, description: str = "") -> Property:
        name = name.strip()
        if not name:
            raise ValueError("Property name is required")
        prop = self.repo.create(Property(owner_id=owner_id, name=name, description=description.strip()))
        if prop.id is None:
            raise ValueError("Created property has no id")
        self.tariff_repo.put(TariffConfiguration.default(prop.id))
        logger.info("Property created: id=%s, name=%s, owner=%s", prop.id, prop.name, owner_id)
        return prop

    def list_properties(self, owner_id: int) -> list[Property]:
        result = self.repo.list_by_owner(owner_id)
        logger.debug("Listed %d properties for owner=%s", len(result), owner_id)
        return result

    def get_property(self, property_id: int) -> Property | None:
        result = self.repo.get_by_id(property_id)
        logger.debug("get_property id=%s found=%s", property_id, result is not None)
        return result

    def get_property_by_uuid(self, uuid: str) -> Property | None:
        result = self.repo.get_by_uuid(uuid)
        logger.debug("get_property_by_uuid uuid=%s found=%s", uuid, result is not None)
        return result

    def rename_property(self, prop: Property, name: str, user_id: int) -> Property:
        if prop.owner_id != user_id:
            logger.warning("Rename refused: property %s is not owned by user %s", prop.id, user_id)
            raise PermissionError("Property belongs to another user")
        name = name.strip()
        if not name:
            raise ValueError("Property name is required")
        if prop.id is None:
            raise ValueError("Cannot rename property without an id")
        self.repo.update_name(prop.id, name)
        prop.name = name
        logger.info("Property %s renamed to %s", prop.id, name)
        return prop
