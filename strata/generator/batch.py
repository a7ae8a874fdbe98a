"""Batch generation of editions.

Each edition runs combination search, compositing and metadata building in
sequence; edition N+1 starts only after edition N is final. Cancellation is
checked between editions, never inside one, so a returned batch never holds
a partial edition.
"""

import logging
import random
from typing import Callable, Iterator

from ..config import (
    DEFAULT_BACKGROUND,
    DEFAULT_PLACEHOLDER_HASH,
    PREVIEW_BACKGROUND,
    resolve_canvas,
    resolve_edition_count,
)
from ..core.models import BatchResult, BatchStats, CanvasSize, CollectionSpec, Edition
from .combination import generate_combination
from .compositor import Compositor, RasterLoader, load_raster
from .metadata import build_metadata


logger = logging.getLogger(__name__)

# (completed, total)
ProgressCallback = Callable[[int, int], None]
CancelCheck = Callable[[], bool]


def _checked_canvas(canvas: CanvasSize | None) -> CanvasSize:
    if canvas is None:
        return CanvasSize()
    return resolve_canvas(canvas.width, canvas.height)


class BatchDriver:
    """Runs N independent edition iterations over a collection snapshot.

    Args:
        spec: Collection snapshot; read-only for the run
        count: Editions requested (None or negative -> default)
        canvas: Output canvas size (non-positive dimensions -> defaults)
        background: Opaque fill beneath all layers
        seed: Seed for a reproducible run (ignored when rng is given)
        rng: Random source
        loader: Image decoder used by the compositor
        placeholder_hash: Provisional token in each record's image locator
    """

    def __init__(
        self,
        spec: CollectionSpec,
        count: int | None = None,
        canvas: CanvasSize | None = None,
        background: str = DEFAULT_BACKGROUND,
        seed: int | None = None,
        rng: random.Random | None = None,
        loader: RasterLoader = load_raster,
        placeholder_hash: str = DEFAULT_PLACEHOLDER_HASH,
    ) -> None:
        self.spec = spec
        self.count = resolve_edition_count(count)
        self.canvas = _checked_canvas(canvas)
        self.rng = rng or random.Random(seed)
        self.placeholder_hash = placeholder_hash
        self.compositor = Compositor(self.canvas, background=background, loader=loader)
        self.stats = BatchStats(requested=self.count)
        self._cancelled = False

    def cancel(self) -> None:
        """Stop after the edition currently being built."""
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def build_edition(self, index: int) -> Edition:
        """Generate one edition. Raises on unexpected failures."""
        layers = self.spec.layers
        result = generate_combination(layers, self.spec.rules, self.rng)

        skipped_before = self.compositor.skipped_assets
        image_png = self.compositor.composite(result.selection, layers)
        self.stats.skipped_assets += self.compositor.skipped_assets - skipped_before

        metadata = build_metadata(
            result.selection,
            layers,
            edition=index,
            collection_name=self.spec.name,
            collection_description=self.spec.description,
            placeholder_hash=self.placeholder_hash,
        )

        if not result.valid:
            self.stats.fallback += 1
            logger.warning(f"[Batch] edition {index} violates an exclusion rule (retry budget exhausted)")

        return Edition(
            index=index,
            image_png=image_png,
            metadata=metadata,
            selection=result.selection,
            valid=result.valid,
        )

    def iter_editions(
        self,
        on_progress: ProgressCallback | None = None,
        should_cancel: CancelCheck | None = None,
    ) -> Iterator[Edition]:
        """Yield editions 1..count in order.

        A failing edition is logged and counted, and the batch moves on.
        """
        logger.info(f"[Batch] generating {self.count} editions at {self.canvas.width}x{self.canvas.height}")

        for index in range(1, self.count + 1):
            if self._cancelled or (should_cancel is not None and should_cancel()):
                self._cancelled = True
                logger.info(f"[Batch] cancelled after {self.stats.completed} editions")
                return

            try:
                edition = self.build_edition(index)
            except Exception:
                self.stats.failed += 1
                logger.exception(f"[Batch] edition {index} failed")
                edition = None

            if edition is not None:
                self.stats.completed += 1
                yield edition

            if on_progress:
                on_progress(self.stats.completed, self.count)

        logger.info(
            f"[Batch] done: {self.stats.completed} editions, "
            f"{self.stats.fallback} fallback, {self.stats.failed} failed"
        )

    def run(
        self,
        on_progress: ProgressCallback | None = None,
        should_cancel: CancelCheck | None = None,
    ) -> BatchResult:
        editions = list(self.iter_editions(on_progress=on_progress, should_cancel=should_cancel))
        return BatchResult(editions=editions, stats=self.stats, cancelled=self._cancelled)


def generate_batch(
    spec: CollectionSpec,
    count: int | None = None,
    canvas: CanvasSize | None = None,
    on_progress: ProgressCallback | None = None,
    should_cancel: CancelCheck | None = None,
    **kwargs,
) -> BatchResult:
    """Generate `count` editions from a collection snapshot.

    Args:
        spec: Collection snapshot (layers, rules, name, description)
        count: Number of editions; 0 yields an empty result
        canvas: Output canvas size
        on_progress: Called with (editions completed, total) after each edition
        should_cancel: Polled before each edition; True stops the batch
        **kwargs: Passed through to BatchDriver (seed, rng, loader, background, ...)

    Returns:
        BatchResult with editions in index order and run statistics
    """
    driver = BatchDriver(spec, count=count, canvas=canvas, **kwargs)
    return driver.run(on_progress=on_progress, should_cancel=should_cancel)


def generate_preview(
    spec: CollectionSpec,
    canvas: CanvasSize | None = None,
    rng: random.Random | None = None,
    loader: RasterLoader = load_raster,
) -> bytes:
    """Composite one rule-respecting combination for previewing, without metadata."""
    canvas = _checked_canvas(canvas)
    result = generate_combination(spec.layers, spec.rules, rng)
    compositor = Compositor(canvas, background=PREVIEW_BACKGROUND, loader=loader)
    return compositor.composite(result.selection, spec.layers)
