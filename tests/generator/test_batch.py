"""Tests for batch generation."""

from collections import Counter
from unittest.mock import MagicMock

import pytest
from PIL import Image

from strata.core.models import BatchResult, CanvasSize, CollectionSpec, Layer
from strata.errors import AssetLoadError
from strata.generator.batch import BatchDriver, generate_batch, generate_preview
from strata.generator.compositor import load_raster


SMALL = CanvasSize(width=20, height=20)


def _flaky_loader(fail_on_call=1):
    calls = {"n": 0}

    def loader(source):
        calls["n"] += 1
        if calls["n"] == fail_on_call:
            raise RuntimeError("decoder crashed")
        return load_raster(source)

    return loader


class TestGenerateBatch:
    """End-to-end batch scenarios."""

    def test_rarity_distribution_over_1000_editions(self, two_layer_spec):
        """Picks follow the rarity weights over a large batch."""
        result = generate_batch(two_layer_spec, count=1000, canvas=SMALL, seed=42)

        assert len(result.editions) == 1000
        assert [e.index for e in result.editions] == list(range(1, 1001))
        assert all(len(e.metadata.attributes) == 2 for e in result.editions)

        shapes = Counter(e.metadata.attributes[1].value for e in result.editions)
        assert shapes["circle"] / 1000 == pytest.approx(0.99, abs=0.015)

        backgrounds = Counter(e.metadata.attributes[0].value for e in result.editions)
        assert backgrounds["red"] / 1000 == pytest.approx(0.5, abs=0.06)

    def test_unsatisfiable_rules_still_complete(self, blocked_spec):
        """Every edition falls back but the batch still finishes."""
        result = generate_batch(blocked_spec, count=5, canvas=SMALL, seed=1)

        assert len(result.editions) == 5
        assert result.stats.fallback == 5
        for edition in result.editions:
            assert not edition.valid
            assert edition.selection == {"A": "a1", "B": "b1"}

    def test_zero_editions(self, two_layer_spec):
        """A count of zero yields an empty result."""
        result = generate_batch(two_layer_spec, count=0, canvas=SMALL)

        assert isinstance(result, BatchResult)
        assert result.editions == []
        assert result.stats.completed == 0

    def test_negative_count_uses_default(self, two_layer_spec):
        """A negative count is replaced by the default of 100."""
        driver = BatchDriver(two_layer_spec, count=-3, canvas=SMALL)
        assert driver.count == 100

    def test_invalid_canvas_falls_back_to_default(self, two_layer_spec, png):
        """A non-positive dimension is replaced and every edition completes."""
        result = generate_batch(two_layer_spec, count=3, canvas=CanvasSize(width=-1, height=12), seed=1)

        assert len(result.editions) == 3
        assert result.stats.failed == 0
        assert png.decode(result.editions[0].image_png).size == (500, 12)

    def test_zero_canvas_uses_defaults(self, two_layer_spec):
        """A 0x0 canvas becomes the 500x500 default."""
        driver = BatchDriver(two_layer_spec, count=1, canvas=CanvasSize(width=0, height=0))
        assert driver.canvas == CanvasSize(width=500, height=500)

    def test_empty_layer_absent_everywhere(self, two_layer_spec):
        """Empty layers appear in neither selections nor attributes."""
        spec = two_layer_spec.model_copy(
            update={"layers": (two_layer_spec.layers[0], Layer(id="empty", name="Empty"), two_layer_spec.layers[1])}
        )

        result = generate_batch(spec, count=20, canvas=SMALL, seed=3)

        for edition in result.editions:
            assert "empty" not in edition.selection
            assert [a.trait_type for a in edition.metadata.attributes] == ["Background", "Shape"]

    def test_metadata_fields(self, two_layer_spec):
        """Records carry the collection fields and placeholder locator."""
        result = generate_batch(two_layer_spec, count=3, canvas=SMALL, seed=9)

        third = result.editions[2].metadata
        assert third.name == "Test Collection #3"
        assert third.description == "A test collection"
        assert third.edition == 3
        assert third.image == "ipfs://NEW_HASH_HERE/3.png"

    def test_images_are_canvas_sized_pngs(self, two_layer_spec, png):
        """Each edition image matches the requested canvas."""
        result = generate_batch(two_layer_spec, count=2, canvas=CanvasSize(width=30, height=12), seed=4)

        for edition in result.editions:
            assert png.decode(edition.image_png).size == (30, 12)
            assert edition.filename == f"{edition.index}.png"

    def test_seed_reproducible(self, two_layer_spec):
        """The same seed gives the same selections."""
        a = generate_batch(two_layer_spec, count=25, canvas=SMALL, seed=77)
        b = generate_batch(two_layer_spec, count=25, canvas=SMALL, seed=77)

        assert [e.selection for e in a.editions] == [e.selection for e in b.editions]

    def test_progress_reported(self, two_layer_spec):
        """Progress is reported after each edition."""
        progress = MagicMock()

        generate_batch(two_layer_spec, count=4, canvas=SMALL, on_progress=progress)

        assert [c.args for c in progress.call_args_list] == [(1, 4), (2, 4), (3, 4), (4, 4)]

    def test_progress_counts_completed_editions(self, two_layer_spec):
        """A failed edition does not advance the completed count."""
        progress = MagicMock()

        generate_batch(two_layer_spec, count=3, canvas=SMALL, seed=5, loader=_flaky_loader(), on_progress=progress)

        assert [c.args for c in progress.call_args_list] == [(0, 3), (1, 3), (2, 3)]

    def test_cancel_between_editions(self, two_layer_spec):
        """should_cancel stops the batch before the next edition."""
        done = []

        result = generate_batch(
            two_layer_spec,
            count=10,
            canvas=SMALL,
            on_progress=lambda completed, total: done.append(completed),
            should_cancel=lambda: len(done) >= 3,
        )

        assert result.cancelled
        assert [e.index for e in result.editions] == [1, 2, 3]

    def test_cancel_via_driver(self, two_layer_spec):
        """BatchDriver.cancel() stops iteration after the current edition."""
        driver = BatchDriver(two_layer_spec, count=10, canvas=SMALL)
        collected = []

        for edition in driver.iter_editions():
            collected.append(edition)
            if len(collected) == 2:
                driver.cancel()

        assert len(collected) == 2
        assert driver.cancelled

    def test_failing_edition_does_not_stop_batch(self, two_layer_spec):
        """An unexpected error in one edition is counted and the rest complete."""
        result = generate_batch(two_layer_spec, count=3, canvas=SMALL, seed=5, loader=_flaky_loader())

        assert result.stats.failed == 1
        assert [e.index for e in result.editions] == [2, 3]

    def test_broken_asset_skipped_but_edition_completes(self, two_layer_spec):
        """AssetLoadError skips the layer, not the edition."""
        def loader(source):
            raise_for = two_layer_spec.layers[1].images[0].source
            if source == raise_for:
                raise AssetLoadError("corrupt")
            return load_raster(source)

        result = generate_batch(two_layer_spec, count=10, canvas=SMALL, seed=6, loader=loader)

        assert len(result.editions) == 10
        assert result.stats.skipped_assets > 0
        assert result.stats.failed == 0

    def test_oversized_assets_skipped_but_editions_complete(self, two_layer_spec, monkeypatch):
        """Images over Pillow's pixel limit are skipped like any broken asset."""
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

        result = generate_batch(two_layer_spec, count=2, canvas=SMALL, seed=8)

        assert len(result.editions) == 2
        assert result.stats.failed == 0
        assert result.stats.skipped_assets == 4


class TestGeneratePreview:
    """Tests for single-combination previews."""

    def test_preview_uses_light_background(self, png):
        """Previews sit on the light preview background."""
        data = generate_preview(CollectionSpec(), canvas=SMALL)

        assert png.decode(data).getpixel((0, 0)) == (0xF5, 0xF5, 0xF5)

    def test_preview_draws_layers(self, two_layer_spec, png):
        """Every selected layer is loaded and drawn."""
        loader = MagicMock(side_effect=lambda source: Image.new("RGBA", (20, 20), (1, 2, 3, 255)))

        data = generate_preview(two_layer_spec, canvas=SMALL, loader=loader)

        assert png.decode(data).getpixel((5, 5)) == (1, 2, 3)
        assert loader.call_count == 2

    def test_preview_invalid_canvas_uses_defaults(self, png):
        """A non-positive preview canvas is replaced by the default size."""
        data = generate_preview(CollectionSpec(), canvas=CanvasSize(width=8, height=-5))

        assert png.decode(data).size == (8, 500)
