from __future__ import annotations

from pydantic import BaseModel

from utiltrack.models.property import Property
from utiltrack.models.user import User


class UserSession(BaseModel):
    """Who is signed in and which property they are working on."""

    user_id: int
    email: str
    property_id: int | None = None

    @classmethod
    def for_user(cls, user: User) -> UserSession:
        if user.id is None:
            raise ValueError("Cannot open a session for a user without an id")
        return cls(user_id=user.id, email=user.email)

    def select_property(self, prop: Property) -> None:
        if prop.owner_id != self.user_id:
            raise ValueError("Property belongs to another user")
        self.property_id = prop.id
