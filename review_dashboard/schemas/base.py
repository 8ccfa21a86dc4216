"""
Shared Pydantic base for all wire schemas.
Attributes are snake_case in Python and camelCase on the wire.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_wire(self) -> dict:
        """JSON-safe dict using camelCase keys"""
        return self.model_dump(mode="json", by_alias=True)
