# backend/app/schemas/common.py
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


class CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire; both accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ReviewCounts(CamelModel):
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    total: int = 0
