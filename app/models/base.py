"""Shared base model for API payloads.

Attributes are snake_case in Python and camelCase on the wire, which is
what the dashboard frontend reads.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialising field names as camelCase."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
