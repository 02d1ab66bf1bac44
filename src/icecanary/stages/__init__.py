"""Generation stages of a pack build, in execution order."""

from .metadata import build_pack_meta, write_metadata
from .icon import write_icon
from .languages import load_texts, merge_texts, write_languages
from .raw import copy_tree, write_archive_raw, write_raw

__all__ = [
    "build_pack_meta",
    "write_metadata",
    "write_icon",
    "load_texts",
    "merge_texts",
    "write_languages",
    "copy_tree",
    "write_raw",
    "write_archive_raw",
]
