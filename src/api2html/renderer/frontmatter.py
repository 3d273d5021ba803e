from __future__ import annotations

from typing import Any

from ..utils import load_yaml

DELIMITER = "---"


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Separate a leading YAML front matter block from the Markdown body."""

    lines = text.splitlines()
    if not lines or lines[0].strip() != DELIMITER:
        return {}, text
    for index in range(1, len(lines)):
        if lines[index].strip() == DELIMITER:
            front = load_yaml("\n".join(lines[1:index])) or {}
            if not isinstance(front, dict):
                raise ValueError("Front matter must be a mapping")
            return front, "\n".join(lines[index + 1 :])
    return {}, text


def language_tabs(front: dict[str, Any]) -> list[tuple[str, str]]:
    tabs: list[tuple[str, str]] = []
    for entry in front.get("language_tabs") or []:
        if isinstance(entry, dict):
            tabs.extend((str(key), str(label or key)) for key, label in entry.items())
        elif entry:
            tabs.append((str(entry), str(entry)))
    return tabs


__all__ = ["split_front_matter", "language_tabs"]
