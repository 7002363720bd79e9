from typing import Any, ClassVar, Generic, Tuple, TypeVar, Optional
from pydantic import BaseModel, ConfigDict, model_validator

T = TypeVar("T")


class StandardResponse(BaseModel, Generic[T]):
    """Standard API response envelope."""
    status: str = "success"
    data: Optional[T] = None
    message: Optional[str] = None


class RequestModel(BaseModel):
    """Base for request bodies: enum fields are stored as their plain values."""
    model_config = ConfigDict(use_enum_values=True)


class UpdateModel(RequestModel):
    """
    Base for partial updates.

    Every field may be omitted, but the ones named in `not_nullable` back
    NOT NULL columns and an explicit null for them is rejected.
    """
    not_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def reject_explicit_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            nulls = [f for f in cls.not_nullable if f in data and data[f] is None]
            if nulls:
                raise ValueError(f"May not be null: {', '.join(nulls)}")
        return data
