from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from utiltrack.models.property import Property
from web.deps import get_owned_property, get_property_service, get_session
from web.schemas import NameIn, PropertyIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/properties")


def property_json(prop: Property) -> dict:
    return {
        "uuid": prop.uuid,
        "name": prop.name,
        "description": prop.description,
        "created_at": prop.created_at.isoformat() if prop.created_at else None,
    }


@router.get("")
async def list_properties(request: Request):
    session = get_session(request)
    properties = get_property_service(request).list_properties(session.user_id)
    return [property_json(p) for p in properties]


@router.post("", status_code=201)
async def create_property(request: Request, body: PropertyIn):
    session = get_session(request)
    try:
        prop = get_property_service(request).create_property(session.user_id, body.name, body.description)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    request.session["property_id"] = prop.id
    return property_json(prop)


@router.put("/{property_uuid}")
async def rename_property(request: Request, property_uuid: str, body: NameIn):
    session, prop = get_owned_property(request, property_uuid)
    try:
        prop = get_property_service(request).rename_property(prop, body.name, session.user_id)
    except PermissionError:
        raise HTTPException(status_code=403, detail="Forbidden")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return property_json(prop)
