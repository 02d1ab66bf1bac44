"""Flattening of nested ("objective") translation data.

Mapping keys are joined with ``.``; list items append ``[index]`` to their
parent key::

    {"gui": {"title": "T", "lines": ["a", "b"]}}
    -> {"gui.title": "T", "gui.lines[0]": "a", "gui.lines[1]": "b"}

Leaves become strings the way they read in JSON: booleans as ``true`` and
``false``, numbers via ``str()``. ``None`` leaves are dropped.
"""

from __future__ import annotations

from typing import Any, Dict

__all__ = ["flatten_texts", "join_key", "leaf_text"]


def join_key(prefix: str, key: Any) -> str:
    if isinstance(key, int) and not isinstance(key, bool):
        return f"{prefix}[{key}]"
    return f"{prefix}.{key}" if prefix else str(key)


def leaf_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _walk(node: Any, prefix: str, out: Dict[str, str]) -> None:
    if isinstance(node, dict):
        for key, value in node.items():
            _walk(value, join_key(prefix, str(key)), out)
    elif isinstance(node, list):
        for idx, value in enumerate(node):
            _walk(value, join_key(prefix, idx), out)
    elif node is not None:
        out[prefix] = leaf_text(node)


def flatten_texts(tree: Any) -> Dict[str, str]:
    out: Dict[str, str] = {}
    _walk(tree, "", out)
    return out
