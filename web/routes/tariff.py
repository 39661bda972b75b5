from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from utiltrack.models.tariff import TariffConfiguration
from web.deps import get_owned_property, get_tariff_service
from web.schemas import CustomFieldIn, PriceIn, TariffUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/properties/{property_uuid}")


def tariff_json(config: TariffConfiguration) -> dict:
    return config.model_dump(mode="json", exclude={"property_id"})


@router.get("/tariffs")
async def get_tariffs(request: Request, property_uuid: str):
    _, prop = get_owned_property(request, property_uuid)
    return tariff_json(get_tariff_service(request).get_configuration(prop.id))


@router.put("/tariffs")
async def update_tariffs(request: Request, property_uuid: str, body: TariffUpdate):
    _, prop = get_owned_property(request, property_uuid)
    service = get_tariff_service(request)
    try:
        config = service.update_settings(prop.id, body.rates(), body.last_readings, body.custom_last_readings)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return tariff_json(config)


@router.post("/custom-fields", status_code=201)
async def add_custom_field(request: Request, property_uuid: str, body: CustomFieldIn):
    _, prop = get_owned_property(request, property_uuid)
    try:
        field = get_tariff_service(request).add_custom_field(
            prop.id,
            name=body.name,
            field_type=body.type,
            price=body.price,
            unit=body.unit,
            start_reading=body.start_reading,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return field.model_dump(mode="json")


@router.patch("/custom-fields/{field_id}")
async def update_custom_field_price(request: Request, property_uuid: str, field_id: str, body: PriceIn):
    _, prop = get_owned_property(request, property_uuid)
    try:
        field = get_tariff_service(request).update_custom_field_price(prop.id, field_id, body.price)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return field.model_dump(mode="json")


@router.delete("/custom-fields/{field_id}")
async def delete_custom_field(request: Request, property_uuid: str, field_id: str):
    _, prop = get_owned_property(request, property_uuid)
    try:
        config = get_tariff_service(request).delete_custom_field(prop.id, field_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return tariff_json(config)
