from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import Any

import yaml


SAFE_ANCHOR_RE = re.compile(r"[^a-z0-9_-]+")


class _PlainScalarLoader(yaml.SafeLoader):
    """Safe loader that keeps timestamps as the strings they were written as."""


_PlainScalarLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load_yaml(text: str) -> Any:
    return yaml.load(text, Loader=_PlainScalarLoader)


def slugify(value: str, max_length: int = 120) -> str:
    normalized = SAFE_ANCHOR_RE.sub("-", value.strip().lower())
    normalized = re.sub("-+", "-", normalized)
    normalized = normalized.strip("-_")
    if not normalized:
        normalized = "section"
    if len(normalized) > max_length:
        normalized = normalized[:max_length]
    return normalized


def atomic_write(path: Path, data: str, encoding: str = "utf-8") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile("w", delete=False, dir=path.parent, encoding=encoding) as tmp:
        tmp.write(data)
        tmp.flush()
        os.fsync(tmp.fileno())
    try:
        os.replace(tmp.name, path)
    except OSError:
        Path(tmp.name).unlink(missing_ok=True)
        raise


def split_list(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


def normalize_newlines(text: str) -> str:
    """Unify line endings and blank out whitespace-only lines."""

    return "\n".join(line if line.strip() else "" for line in text.splitlines()) + "\n"


def looks_like_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))


__all__ = ["slugify", "atomic_write", "split_list", "normalize_newlines", "looks_like_url", "load_yaml"]
