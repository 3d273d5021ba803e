from __future__ import annotations

import asyncio
import json
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import yaml

from . import converter, renderer
from .config import AppConfig
from .constraint import CUSTOM_CSS_PLACEHOLDER
from .errors import (
    Api2HtmlError,
    CollaboratorError,
    InputError,
    InvalidConfigurationError,
    OutputError,
)
from .logging import RunLogEntry, RunLogger, StageTimings
from .models import ConversionOptions, RenderOptions, RenderResult, TranslatedOptions
from .utils import atomic_write, load_yaml

StepCallback = Callable[[str], None]

PLACEHOLDER_RE = re.compile(re.escape(CUSTOM_CSS_PLACEHOLDER), re.IGNORECASE)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def load_custom_css(path: Path) -> str:
    try:
        return path.resolve().read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InvalidConfigurationError("CSS_READ_FAILED", f"Error loading custom css file: {exc}") from exc


def apply_custom_css(page: str, css: str) -> str:
    """Replace the first custom CSS placeholder; pages without one pass through."""

    return PLACEHOLDER_RE.sub(lambda _: css, page, count=1)


def parse_document(text: str) -> dict[str, Any]:
    try:
        document = load_yaml(text)
    except yaml.YAMLError as exc:
        # tab-indented JSON is valid JSON but not valid YAML
        try:
            document = json.loads(text)
        except ValueError:
            raise InputError("PARSE_ERROR", f"Failed to parse the source OpenAPI document: {exc}") from exc
    if not isinstance(document, dict):
        raise InputError("PARSE_ERROR", "Failed to parse the source OpenAPI document: not a mapping")
    return document


@dataclass(slots=True)
class _RunContext:
    source: Path
    output: Path
    timings: StageTimings
    step: StepCallback


class RenderService:
    """Runs the read, parse, convert, render, write pipeline for one document."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or AppConfig()
        self._logger = RunLogger(self._config.runtime.log_file)

    async def run(
        self,
        source: Path,
        output: Path,
        options: TranslatedOptions,
        *,
        step: StepCallback | None = None,
    ) -> RenderResult:
        context = _RunContext(
            source=source,
            output=output,
            timings=StageTimings(),
            step=step or (lambda _: None),
        )
        try:
            result = await self._run_internal(context, options)
        except Api2HtmlError as exc:
            self._log(context, "failure", exc.code, 0)
            raise
        self._log(context, "success", None, result.size_bytes)
        return result

    async def _run_internal(self, context: _RunContext, options: TranslatedOptions) -> RenderResult:
        custom_css = ""
        if options.custom_css_path is not None:
            custom_css = load_custom_css(options.custom_css_path)
            context.step("Read custom css file!")

        text = self._read_source(context)
        context.step("Read source file!")

        start = time.perf_counter()
        document = parse_document(text)
        context.timings.parse_ms = _elapsed_ms(start)

        markdown = await self._convert(document, options.conversion, context.timings)
        context.step("Converted OpenAPI docs to markdown!")

        page = await self._render(markdown, options.render, context.timings)
        context.step("Rendered HTML from markdown!")

        applied = False
        if custom_css:
            patched = apply_custom_css(page, custom_css)
            applied = patched != page
            page = patched

        self._write_output(context, page)
        context.step("Wrote output file!")
        size_bytes = context.output.stat().st_size
        return RenderResult(
            output_path=context.output,
            size_bytes=size_bytes,
            timings=context.timings,
            summary=f"Rendered {context.source.name} -> {context.output}",
            custom_css_applied=applied,
        )

    def _read_source(self, context: _RunContext) -> str:
        start = time.perf_counter()
        try:
            text = context.source.resolve().read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise InputError("SOURCE_NOT_FOUND", f"Source file wasn't found: {context.source}") from exc
        context.timings.read_ms = _elapsed_ms(start)
        return text

    async def _convert(
        self, document: dict[str, Any], options: ConversionOptions, timings: StageTimings
    ) -> str:
        start = time.perf_counter()
        try:
            markdown = await converter.convert(document, options)
        except Exception as exc:
            raise CollaboratorError("CONVERSION_FAILED", f"Error during conversion: {exc}") from exc
        timings.convert_ms = _elapsed_ms(start)
        return markdown

    async def _render(self, markdown: str, options: RenderOptions, timings: StageTimings) -> str:
        start = time.perf_counter()
        loop = asyncio.get_running_loop()
        future: asyncio.Future[str] = loop.create_future()

        def _settle(error: Exception | None, page: str | None) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(page or "")

        def _done(error: Exception | None, page: str | None) -> None:
            loop.call_soon_threadsafe(_settle, error, page)

        await asyncio.to_thread(renderer.render, markdown, options, _done)
        try:
            page = await future
        except Exception as exc:
            raise CollaboratorError("RENDER_FAILED", f"Error during rendering: {exc}") from exc
        timings.render_ms = _elapsed_ms(start)
        return page

    def _write_output(self, context: _RunContext, page: str) -> None:
        start = time.perf_counter()
        try:
            atomic_write(context.output.resolve(), page)
        except OSError as exc:
            raise OutputError("WRITE_FAILED", f"Failed to write output file: {exc}") from exc
        context.timings.write_ms = _elapsed_ms(start)

    def _log(self, context: _RunContext, status: str, error_code: str | None, size_bytes: int) -> None:
        if not self._logger.enabled:
            return
        self._logger.append(
            RunLogEntry(
                source=str(context.source),
                output_path=str(context.output),
                status=status,
                error_code=error_code,
                timings=context.timings,
                size_bytes=size_bytes,
            )
        )


__all__ = [
    "RenderService",
    "StepCallback",
    "apply_custom_css",
    "load_custom_css",
    "parse_document",
]
