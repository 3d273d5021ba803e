"""Option records passed between the CLI, the translator and the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .constraint import DEFAULT_THEME
from .logging import StageTimings


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Normalized command line, populated once at startup."""

    source: Path
    out: Path
    resolve: str | None = None
    theme: str | None = None
    custom_logo: str | None = None
    custom_logo_url: str | None = None
    custom_css: bool = False
    custom_css_path: str | None = None
    includes: str | None = None
    languages: str | None = None
    search: bool = True
    summary: bool = False
    omit_body: bool = False
    raw: bool = False


@dataclass(frozen=True, slots=True)
class ConversionOptions:
    """Settings for the OpenAPI to Markdown converter."""

    code_samples: bool = True
    httpsnippet: bool = False
    theme: str = DEFAULT_THEME
    search: bool = True
    discovery: bool = False
    shallow_schemas: bool = False
    toc_summary: bool = False
    headings: int = 2
    verbose: bool = False
    omit_body: bool = False
    sample: bool = True
    language_tabs: tuple[tuple[str, str], ...] = ()
    resolve: bool = False
    source: str | None = None
    includes: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Settings for the Markdown to HTML renderer."""

    inline: bool = True
    unsafe: bool = False
    logo: str | None = None
    logo_url: str | None = None
    custom_css: bool = False


@dataclass(frozen=True, slots=True)
class TranslatedOptions:
    conversion: ConversionOptions
    render: RenderOptions
    custom_css_path: Path | None = None


@dataclass(slots=True)
class RenderResult:
    """Outcome of a successful pipeline run."""

    output_path: Path
    size_bytes: int
    timings: StageTimings
    summary: str
    custom_css_applied: bool = False


__all__ = [
    "CliOptions",
    "ConversionOptions",
    "RenderOptions",
    "TranslatedOptions",
    "RenderResult",
]
