"""Base entity shared by every stored document model"""

from __future__ import annotations

from typing import Annotated, Any, Optional

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer


def validate_object_id(value: Any) -> Optional[ObjectId]:
    """Coerce a string or ObjectId into an ObjectId, None if it is not valid."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def _coerce_object_id(value: Any) -> ObjectId:
    oid = validate_object_id(value)
    if oid is None:
        raise ValueError(f"Invalid ObjectId: {value!r}")
    return oid


PyObjectId = Annotated[
    ObjectId,
    BeforeValidator(_coerce_object_id),
    PlainSerializer(str, return_type=str, when_used="json"),
]


class BaseEntity(BaseModel):
    """Base for MongoDB documents; ``id`` maps to ``_id``."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        use_enum_values=True,
    )

    id: Optional[PyObjectId] = Field(default=None, alias="_id")

    def to_mongo(self) -> dict:
        """Document representation using stored field names, without ``_id``."""
        return self.model_dump(by_alias=True, exclude={"id"})
