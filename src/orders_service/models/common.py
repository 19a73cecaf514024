"""
Shared building blocks for the wire-facing Pydantic models.

Every JSON shape exchanged with API callers, the product catalog, the queue and the
event bus uses camelCase field names; Python code uses snake_case attributes.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# Decimal in memory, plain JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used='json')]


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict:
        """Dump to a JSON-compatible dict using the wire field names."""
        return self.model_dump(mode='json', by_alias=True)
