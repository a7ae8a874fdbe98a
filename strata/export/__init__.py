"""Output packaging: directories, zip archives, repositioning."""

from .archive import (
    IMAGE_FOLDER,
    images_archive,
    metadata_archive,
    renamed_archive,
    save_archive,
    strip_json_suffix,
)
from .writer import load_metadata_dir, write_collection, write_metadata
from .reposition import reposition_editions, shift_png

__all__ = [
    "IMAGE_FOLDER",
    "images_archive",
    "metadata_archive",
    "renamed_archive",
    "save_archive",
    "strip_json_suffix",
    "load_metadata_dir",
    "write_collection",
    "write_metadata",
    "reposition_editions",
    "shift_png",
]
