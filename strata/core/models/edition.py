"""Edition and batch result models."""

from pydantic import BaseModel, ConfigDict, Field

from .metadata import EditionMetadata


class Edition(BaseModel):
    """One generated, numbered asset and its metadata.

    Editions are never mutated; repositioning produces new Edition objects.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=1)
    image_png: bytes = Field(repr=False, description="Losslessly encoded PNG bytes")
    metadata: EditionMetadata
    selection: dict[str, str] = Field(
        default_factory=dict,
        description="layer_id -> image_id chosen for this edition",
    )
    valid: bool = Field(
        default=True,
        description="False when the retry budget ran out and a rule-violating combination was kept",
    )

    @property
    def filename(self) -> str:
        return f"{self.index}.png"


class BatchStats(BaseModel):
    """Counters collected while a batch runs."""

    requested: int = 0
    completed: int = 0
    fallback: int = 0
    skipped_assets: int = 0
    failed: int = 0


class BatchResult(BaseModel):
    """Editions produced by a batch run, in edition order."""

    editions: list[Edition] = Field(default_factory=list)
    stats: BatchStats = Field(default_factory=BatchStats)
    cancelled: bool = False

    def __len__(self) -> int:
        return len(self.editions)

    @property
    def metadata(self) -> list[EditionMetadata]:
        return [e.metadata for e in self.editions]
