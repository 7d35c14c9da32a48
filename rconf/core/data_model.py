__all__ = ["DataModel"]

from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class DataModel(BaseModel):
    """Data model."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        extra="ignore",
        validate_assignment=True,
    )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()

    def copy(self, deep: bool = False, **kwargs):
        return self.model_copy(deep=deep, **kwargs)

    @classmethod
    def from_dict(cls, obj: dict | None) -> Self:
        return cls.model_validate(obj)
