from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from utiltrack.models.bill import BillPreview, BillRecord
from utiltrack.models.reading import MeterEntry
from utiltrack.recognizer.base import recognize_reading
from utiltrack.recognizer.factory import get_recognizer
from web.deps import get_bill_service, get_owned_property, get_property_service, get_session
from web.schemas import CommitIn, NameIn

logger = logging.getLogger(__name__)

router = APIRouter()


def preview_json(preview: BillPreview) -> dict:
    return preview.model_dump(mode="json")


def bill_json(bill: BillRecord) -> dict:
    data = bill.model_dump(mode="json", exclude={"id", "property_id"})
    data["saved"] = True
    return data


@router.post("/api/properties/{property_uuid}/bills/preview")
async def preview_bill(request: Request, property_uuid: str, body: MeterEntry):
    _, prop = get_owned_property(request, property_uuid)
    return preview_json(get_bill_service(request).preview(prop.id, body))


@router.post("/api/properties/{property_uuid}/bills")
async def commit_bill(request: Request, property_uuid: str, body: CommitIn):
    _, prop = get_owned_property(request, property_uuid)
    entry = MeterEntry.model_validate(body.model_dump(exclude={"name"}))
    bill = get_bill_service(request).commit(prop.id, entry, name=body.name.strip())
    if bill is None:
        return {"saved": False}
    return bill_json(bill)


@router.get("/api/properties/{property_uuid}/bills")
async def list_bills(request: Request, property_uuid: str):
    _, prop = get_owned_property(request, property_uuid)
    return [bill_json(b) for b in get_bill_service(request).list_bills(prop.id)]


@router.get("/api/properties/{property_uuid}/bills/trend")
async def cost_trend(request: Request, property_uuid: str):
    _, prop = get_owned_property(request, property_uuid)
    return [
        {"date": created_at.isoformat() if created_at else None, "total": total}
        for created_at, total in get_bill_service(request).cost_trend(prop.id)
    ]


@router.put("/api/bills/{bill_uuid}/name")
async def rename_bill(request: Request, bill_uuid: str, body: NameIn):
    session = get_session(request)
    service = get_bill_service(request)
    bill = service.get_bill_by_uuid(bill_uuid)
    if bill is None:
        raise HTTPException(status_code=404, detail="Bill not found")
    prop = get_property_service(request).get_property(bill.property_id)
    if prop is None or prop.owner_id != session.user_id:
        logger.warning("Access denied: user=%s bill=%s", session.user_id, bill_uuid)
        raise HTTPException(status_code=403, detail="Forbidden")
    return bill_json(service.rename_bill(bill, body.name))


@router.post("/api/recognize")
async def recognize(request: Request):
    image = await request.body()
    return {"value": recognize_reading(get_recognizer(), image)}
