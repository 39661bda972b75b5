from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class Property(BaseModel):
    id: int | None = None
    uuid: str = ""
    owner_id: int
    name: str
    description: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
