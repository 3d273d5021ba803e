"""OpenAPI to Markdown conversion."""

from __future__ import annotations

from typing import Any

from ..models import ConversionOptions
from .document import ApiDocument, UnsupportedDocument
from .markdown import MarkdownWriter
from .refs import ExternalRefLoader, Fetcher, UnresolvedReference


async def convert(
    document: dict[str, Any],
    options: ConversionOptions,
    *,
    fetch: Fetcher | None = None,
) -> str:
    """Convert a parsed OpenAPI/Swagger document into Slate Markdown.

    External ``$ref`` targets are inlined first when ``options.resolve`` is
    set; remote documents are fetched off the event loop.
    """

    if options.resolve and options.source:
        document = await ExternalRefLoader(options.source, fetch=fetch).bundle(document)
    api = ApiDocument(document)
    return MarkdownWriter(api, options).render()


__all__ = ["convert", "ApiDocument", "UnsupportedDocument", "UnresolvedReference"]
