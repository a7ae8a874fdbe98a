"""Edition metadata records.

The record shape is fixed so that serialization is reproducible: field order
is declaration order, and attributes are an explicit list of
TraitAttribute entries in layer order.
"""

import json

from pydantic import BaseModel, ConfigDict, Field


COMPILER_TAG = "Skullines"


class TraitAttribute(BaseModel):
    """A single {trait_type, value} pair."""

    model_config = ConfigDict(frozen=True)

    trait_type: str
    value: str


class EditionMetadata(BaseModel):
    """Metadata for one edition, serialized as `<edition>.json`."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    image: str = Field(description="Asset locator; a placeholder until a CID is known")
    edition: int = Field(ge=1)
    date: int = Field(description="Generation time, milliseconds since the epoch")
    attributes: tuple[TraitAttribute, ...] = ()
    compiler: str = COMPILER_TAG

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")

    def to_json(self) -> str:
        """Serialize with 2-space indentation, keys in declaration order."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
