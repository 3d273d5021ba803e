from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..config import AppConfig, load_config
from ..core import RenderService
from ..errors import Api2HtmlError
from ..languages import DEFAULT_LANGUAGES
from ..models import CliOptions
from ..options import translate_options, validate_arguments
from ..utils import split_list

ICON_OK = "✓"
ICON_FAIL = "✗"

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)

app = typer.Typer(
    help="Convert an OpenAPI specification into a standalone HTML reference page.",
    add_completion=False,
)


def _ok(message: str) -> None:
    console.print(f"[green]{ICON_OK}[/green] {escape(message)}")


def _fail(message: str) -> None:
    err_console.print(f"[red]{ICON_FAIL}[/red] {escape(message)}")


def _version_callback(value: bool) -> None:
    if value:
        console.print(__version__)
        raise typer.Exit()


def _load_config(path: Path | None) -> AppConfig:
    return load_config(path)


def _build_cli_options(
    source: Path,
    out: Path,
    config: AppConfig,
    *,
    resolve: str | None,
    theme: str | None,
    custom_logo: str | None,
    custom_logo_url: str | None,
    custom_css: bool,
    custom_css_path: str | None,
    includes: str | None,
    languages: str | None,
    search: bool,
    no_search: bool,
    summary: bool,
    omit_body: bool,
    raw: bool,
) -> CliOptions:
    defaults = config.defaults
    return CliOptions(
        source=source,
        out=out,
        resolve=resolve,
        theme=theme,
        custom_logo=custom_logo,
        custom_logo_url=custom_logo_url,
        custom_css=custom_css,
        custom_css_path=custom_css_path,
        includes=includes,
        languages=languages,
        search=False if no_search else (search or defaults.search),
        summary=summary or defaults.summary,
        omit_body=omit_body or defaults.omit_body,
        raw=raw or defaults.raw,
    )


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def main(
    sources: Optional[List[Path]] = typer.Argument(None, metavar="<sourcePath>", show_default=False),
    resolve: Optional[str] = typer.Option(
        None, "--resolve", "-r", help="resolve external dependencies, source should be a url or a path"
    ),
    out: Optional[Path] = typer.Option(
        None, "--out", "-o", help="output path for the resulting HTML document"
    ),
    theme: Optional[str] = typer.Option(
        None, "--theme", "-t", help="theme to use (see https://highlightjs.org/static/demo/ for a list)"
    ),
    custom_logo: Optional[str] = typer.Option(
        None, "--customLogo", "-c", help="use custom logo at the respective path"
    ),
    custom_logo_url: Optional[str] = typer.Option(
        None, "--customLogoUrl", "-u", help="url for the custom logo to point to"
    ),
    custom_css: bool = typer.Option(False, "--customCss", "-C", help="use custom css"),
    custom_css_path: Optional[str] = typer.Option(
        None, "--customCssPath", "-P", help="use custom css file"
    ),
    includes: Optional[str] = typer.Option(
        None, "--includes", "-i", help="comma-separated list of files to include"
    ),
    languages: Optional[str] = typer.Option(
        None,
        "--languages",
        "-l",
        help=(
            "comma-separated list of languages to use for the language tabs "
            f"(out of {', '.join(DEFAULT_LANGUAGES.keys)})"
        ),
    ),
    search: bool = typer.Option(False, "--search", "-s", help="enable search"),
    no_search: bool = typer.Option(False, "--no-search", help="disable search"),
    summary: bool = typer.Option(False, "--summary", "-S", help="use summary instead of operationId for TOC"),
    omit_body: bool = typer.Option(
        False, "--omitBody", "-b", help="Omit top-level fake body parameter object"
    ),
    raw: bool = typer.Option(False, "--raw", "-R", help="Show raw schemas in samples, not example values"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config.toml"),
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback, is_eager=True, help="output the version number"
    ),
) -> None:
    """Render <sourcePath> (OpenAPI 3 or Swagger 2, YAML or JSON) into one HTML file."""

    try:
        source, output = validate_arguments(sources, out)
        if languages is not None:
            DEFAULT_LANGUAGES.select(split_list(languages))
        cfg = _load_config(config)
        cli_options = _build_cli_options(
            source,
            output,
            cfg,
            resolve=resolve,
            theme=theme,
            custom_logo=custom_logo,
            custom_logo_url=custom_logo_url,
            custom_css=custom_css,
            custom_css_path=custom_css_path,
            includes=includes,
            languages=languages,
            search=search,
            no_search=no_search,
            summary=summary,
            omit_body=omit_body,
            raw=raw,
        )
        translated = translate_options(cli_options, DEFAULT_LANGUAGES, cfg.defaults)
        service = RenderService(cfg)
        result = asyncio.run(service.run(source, output, translated, step=_ok))
    except Api2HtmlError as exc:
        _fail(str(exc))
        raise typer.Exit(exc.exit_code) from exc
    except Exception as exc:
        _fail(f"Unexpected error: {exc}")
        raise typer.Exit(1) from exc
    _ok(f"Finished! {result.summary}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
