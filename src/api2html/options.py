"""Translate command line options into collaborator settings.

Nothing here touches the file system or terminates the process: problems are
raised as :class:`~api2html.errors.Api2HtmlError` subclasses and the caller
decides what to do with them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from .config import DefaultsConfig
from .errors import InvalidConfigurationError, UsageError
from .languages import LanguageTable
from .models import CliOptions, ConversionOptions, RenderOptions, TranslatedOptions
from .utils import split_list


def validate_arguments(sources: Sequence[Path] | None, out: Path | None) -> tuple[Path, Path]:
    """Check the positional source and the mandatory output option."""

    sources = list(sources or [])
    if not sources:
        raise UsageError("MISSING_SOURCE", "Please specify the source file path as argument!")
    if len(sources) > 1:
        raise UsageError("EXTRA_ARGUMENTS", "Please specify only one argument!")
    if out is None:
        raise UsageError("MISSING_OUTPUT", "Please specify an output path via the '-o' option!")
    return sources[0], out


def translate_options(
    cli: CliOptions,
    languages: LanguageTable,
    defaults: DefaultsConfig | None = None,
) -> TranslatedOptions:
    defaults = defaults or DefaultsConfig()

    requested = split_list(cli.languages) if cli.languages is not None else defaults.languages or None
    language_tabs = languages.select(requested)

    if cli.custom_logo_url and not cli.custom_logo:
        raise InvalidConfigurationError(
            "LOGO_URL_WITHOUT_LOGO",
            "A custom logo URL requires a custom logo path via the '-c' option!",
        )

    theme = (cli.theme or defaults.theme).lower()
    conversion = ConversionOptions(
        code_samples=True,
        httpsnippet=False,
        theme=theme,
        search=cli.search,
        toc_summary=cli.summary,
        headings=2,
        omit_body=cli.omit_body,
        sample=not cli.raw,
        language_tabs=language_tabs,
        resolve=bool(cli.resolve),
        source=cli.resolve or None,
        includes=split_list(cli.includes),
    )
    render = RenderOptions(
        inline=True,
        unsafe=False,
        logo=cli.custom_logo or None,
        logo_url=cli.custom_logo_url if cli.custom_logo else None,
        custom_css=cli.custom_css or bool(cli.custom_css_path),
    )
    css_path = Path(cli.custom_css_path) if cli.custom_css_path else None
    return TranslatedOptions(conversion=conversion, render=render, custom_css_path=css_path)


__all__ = ["validate_arguments", "translate_options"]
