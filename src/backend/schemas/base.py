"""
Shared Pydantic base for API payloads.

Python attributes stay snake_case; JSON on the wire is camelCase.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base schema with camelCase aliases accepted on input and emitted on output."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
