"""User record models and the merge of partial updates."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from api.features.users.entities.user import User, UserRole
from api.shared.exceptions import ValidationError


class UserRecord(BaseModel):
    """Immutable value of a stored user."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: Optional[int] = None
    open_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    login_method: Optional[str] = None
    role: UserRole = UserRole.USER
    last_signed_in: datetime

    @classmethod
    def from_entity(cls, entity: User) -> "UserRecord":
        return cls.model_validate(entity)


class UserUpdate(BaseModel):
    """Partial update of a user record.

    Only explicitly provided fields apply; an explicit ``None`` clears a text
    field, an omitted field leaves it untouched.
    """

    open_id: str = Field(..., description="Identity provider subject")
    name: Optional[str] = None
    email: Optional[str] = None
    login_method: Optional[str] = None
    role: Optional[UserRole] = None
    last_signed_in: Optional[datetime] = None


def merge_user_record(
    existing: Optional[UserRecord],
    update: UserUpdate,
    *,
    owner_open_id: str = "",
    now: datetime,
) -> UserRecord:
    """Return the next user record after applying ``update`` to ``existing``."""
    if not update.open_id or not update.open_id.strip():
        raise ValidationError("User open_id is required for upsert")
    if existing is not None and existing.open_id != update.open_id:
        raise ValidationError(
            "User update does not match the stored record",
            {"stored": existing.open_id, "update": update.open_id},
        )

    changes = update.model_dump(exclude_unset=True, exclude={"open_id"})
    if changes.get("role") is None:
        changes.pop("role", None)
        if owner_open_id and update.open_id == owner_open_id:
            changes["role"] = UserRole.ADMIN
    if changes.get("last_signed_in") is None:
        changes.pop("last_signed_in", None)

    if existing is None:
        base = UserRecord(open_id=update.open_id, last_signed_in=now)
        return base.model_copy(update=changes)

    if not changes:
        changes["last_signed_in"] = now
    return existing.model_copy(update=changes)
