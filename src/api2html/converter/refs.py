"""JSON reference handling for OpenAPI documents.

Internal references (``#/components/schemas/Pet``) are followed lazily while
the Markdown is written. External references (``common.yaml#/Error``) are
only followed when resolution is enabled and are inlined into the document
before conversion starts.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable
from urllib.parse import urljoin

import requests

from ..utils import load_yaml, looks_like_url

Fetcher = Callable[[str], str]

REQUEST_TIMEOUT_S = 30


class UnresolvedReference(LookupError):
    """Raised when a reference cannot be followed."""


def split_ref(ref: str) -> tuple[str, str]:
    if "#" not in ref:
        return ref, ""
    location, fragment = ref.split("#", 1)
    return location, fragment


def _decode_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def resolve_pointer(document: Any, pointer: str) -> Any:
    if not pointer:
        return document
    if not pointer.startswith("/"):
        raise UnresolvedReference(f"Unsupported JSON pointer: #{pointer}")
    current = document
    for raw_token in pointer[1:].split("/"):
        token = _decode_token(raw_token)
        if isinstance(current, list):
            try:
                current = current[int(token)]
            except (ValueError, IndexError) as exc:
                raise UnresolvedReference(f"Cannot resolve #{pointer}: bad index {token!r}") from exc
        elif isinstance(current, dict):
            if token not in current:
                raise UnresolvedReference(f"Cannot resolve #{pointer}: missing key {token!r}")
            current = current[token]
        else:
            raise UnresolvedReference(f"Cannot resolve #{pointer}: {token!r} is not a container")
    return current


def ref_name(ref: str) -> str:
    return ref.rsplit("/", 1)[-1]


class RefResolver:
    """Follows internal references against the root document."""

    def __init__(self, document: dict[str, Any]) -> None:
        self._document = document

    def lookup(self, ref: str) -> Any:
        location, fragment = split_ref(ref)
        if location:
            raise UnresolvedReference(f"External reference {ref!r} was not resolved; use --resolve")
        return resolve_pointer(self._document, fragment)

    def deref(self, node: Any) -> Any:
        """Follow a chain of ``$ref`` nodes and return the first concrete node."""

        seen: set[str] = set()
        while isinstance(node, dict) and isinstance(node.get("$ref"), str):
            ref = node["$ref"]
            if ref in seen:
                return {}
            seen.add(ref)
            node = self.lookup(ref)
        return node


def _fetch_url(url: str) -> str:
    response = requests.get(url, timeout=REQUEST_TIMEOUT_S)
    response.raise_for_status()
    return response.text


class ExternalRefLoader:
    """Inlines references into other files or URLs, relative to *base*."""

    def __init__(self, base: str, fetch: Fetcher | None = None) -> None:
        self._base = self._normalize_base(base)
        self._fetch = fetch or _fetch_url
        self._cache: dict[str, Any] = {}

    @staticmethod
    def _normalize_base(base: str) -> str:
        if looks_like_url(base):
            return base
        path = Path(base).resolve()
        if path.is_dir():
            return str(path / "index.yaml")
        return str(path)

    async def bundle(self, document: dict[str, Any]) -> dict[str, Any]:
        return await self._walk(document, self._base, None, ())

    async def _walk(
        self,
        node: Any,
        base: str,
        current: Any,
        stack: tuple[tuple[str, str], ...],
    ) -> Any:
        if isinstance(node, list):
            return [await self._walk(item, base, current, stack) for item in node]
        if not isinstance(node, dict):
            return node
        ref = node.get("$ref")
        if isinstance(ref, str):
            location, fragment = split_ref(ref)
            if not location:
                if current is None:
                    return dict(node)
                key = (base, fragment)
                if key in stack:
                    return {"x-circular-ref": ref}
                target = resolve_pointer(current, fragment)
                return await self._walk(target, base, current, stack + (key,))
            target_location = self._join(base, location)
            key = (target_location, fragment)
            if key in stack:
                return {"x-circular-ref": ref}
            loaded = await self._load(target_location)
            target = resolve_pointer(loaded, fragment)
            return await self._walk(target, target_location, loaded, stack + (key,))
        return {name: await self._walk(value, base, current, stack) for name, value in node.items()}

    @staticmethod
    def _join(base: str, location: str) -> str:
        if looks_like_url(location):
            return location
        if looks_like_url(base):
            return urljoin(base, location)
        return str((Path(base).parent / location).resolve())

    async def _load(self, location: str) -> Any:
        if location in self._cache:
            return self._cache[location]
        if looks_like_url(location):
            text = await asyncio.to_thread(self._fetch, location)
        else:
            text = Path(location).read_text(encoding="utf-8")
        loaded = load_yaml(text)
        self._cache[location] = loaded
        return loaded


__all__ = [
    "ExternalRefLoader",
    "RefResolver",
    "UnresolvedReference",
    "ref_name",
    "resolve_pointer",
    "split_ref",
]
