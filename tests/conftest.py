"""Global fixtures for Strata tests."""

import base64
import io

import pytest
from PIL import Image, ImageDraw

from strata.core.models import (
    CollectionSpec,
    ExclusionRule,
    Layer,
    TraitImage,
)


RED = (255, 0, 0)
BLUE = (0, 0, 255)
GREEN = (0, 255, 0)


def make_png(color, size=(20, 20), shape=None) -> bytes:
    """Build a small PNG.

    shape=None fills the whole image; "center" draws an opaque square in the
    middle of a transparent image.
    """
    if shape is None:
        img = Image.new("RGBA", size, color + (255,))
    else:
        img = Image.new("RGBA", size, (0, 0, 0, 0))
        w, h = size
        draw = ImageDraw.Draw(img)
        draw.rectangle([w // 4, h // 4, w - w // 4 - 1, h - h // 4 - 1], fill=color + (255,))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def data_uri(png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


def decode(png: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(png))
    img.load()
    return img.convert("RGB")


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep config reads and writes inside the test's tmp dir."""
    home = tmp_path / "strata_home"
    monkeypatch.setenv("STRATA_HOME", str(home))
    return home


@pytest.fixture
def two_layer_spec():
    """Background (red 1, blue 1) under Shape (circle 100, square 1)."""
    background = Layer(
        id="bg",
        name="Background",
        images=(
            TraitImage(id="red", layer_id="bg", name="red", rarity=1, source=data_uri(make_png(RED))),
            TraitImage(id="blue", layer_id="bg", name="blue", rarity=1, source=data_uri(make_png(BLUE))),
        ),
    )
    shape = Layer(
        id="shape",
        name="Shape",
        images=(
            TraitImage(
                id="circle",
                layer_id="shape",
                name="circle",
                rarity=100,
                source=data_uri(make_png(GREEN, shape="center")),
            ),
            TraitImage(
                id="square",
                layer_id="shape",
                name="square",
                rarity=1,
                source=data_uri(make_png(BLUE, shape="center")),
            ),
        ),
    )
    return CollectionSpec(
        name="Test Collection",
        description="A test collection",
        layers=(background, shape),
    )


@pytest.fixture
def blocked_spec():
    """Two single-image layers whose only combination is excluded."""
    return CollectionSpec(
        name="Blocked",
        description="Unsatisfiable",
        layers=(
            Layer(id="A", name="A", images=(TraitImage(id="a1", layer_id="A", name="a1", source=data_uri(make_png(RED))),)),
            Layer(id="B", name="B", images=(TraitImage(id="b1", layer_id="B", name="b1", source=data_uri(make_png(BLUE))),)),
        ),
        rules=(ExclusionRule(layer_a="A", image_a="a1", layer_b="B", image_b="b1"),),
    )


@pytest.fixture
def layers_dir(tmp_path):
    """On-disk layer folders: Background/{red,blue}.png, Shape/circle.png, Empty/."""
    root = tmp_path / "layers"
    (root / "Background").mkdir(parents=True)
    (root / "Shape").mkdir()
    (root / "Empty").mkdir()
    (root / "Background" / "red.png").write_bytes(make_png(RED))
    (root / "Background" / "blue.png").write_bytes(make_png(BLUE))
    (root / "Shape" / "circle.png").write_bytes(make_png(GREEN, shape="center"))
    (root / "Shape" / "notes.txt").write_text("not an image")
    return root


@pytest.fixture
def png():
    """PNG helpers for building and inspecting test rasters."""

    class _Helpers:
        red = RED
        blue = BLUE
        green = GREEN
        make = staticmethod(make_png)
        data_uri = staticmethod(data_uri)
        decode = staticmethod(decode)

    return _Helpers
