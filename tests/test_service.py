import asyncio
import json
from pathlib import Path

import pytest

from api2html.config import AppConfig, RuntimeConfig
from api2html.constraint import CUSTOM_CSS_PLACEHOLDER
from api2html.core import RenderService, apply_custom_css, parse_document
from api2html.errors import CollaboratorError, InputError, InvalidConfigurationError, OutputError
from api2html.languages import DEFAULT_LANGUAGES
from api2html.models import CliOptions
from api2html.options import translate_options


def build_config(log_file: Path | None = None) -> AppConfig:
    return AppConfig(runtime=RuntimeConfig(log_file=log_file))


def translated(source: Path, out: Path, **overrides):
    return translate_options(CliOptions(source=source, out=out, **overrides), DEFAULT_LANGUAGES)


def run(service: RenderService, source: Path, out: Path, **overrides):
    steps: list[str] = []
    result = asyncio.run(service.run(source, out, translated(source, out, **overrides), step=steps.append))
    return result, steps


def test_run_writes_standalone_page(petstore_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "site" / "index.html"
    result, steps = run(RenderService(build_config()), petstore_file, out)
    page = out.read_text(encoding="utf-8")
    assert result.output_path == out
    assert result.size_bytes == out.stat().st_size
    assert "darkula" in page
    assert "<script src" not in page
    assert "listPets" in page
    assert steps == [
        "Read source file!",
        "Converted OpenAPI docs to markdown!",
        "Rendered HTML from markdown!",
        "Wrote output file!",
    ]


def test_custom_css_replaces_placeholder(petstore_file: Path, tmp_path: Path) -> None:
    css = tmp_path / "custom.css"
    css.write_text("body { color: red; }", encoding="utf-8")
    out = tmp_path / "index.html"
    result, steps = run(RenderService(), petstore_file, out, custom_css_path=str(css))
    page = out.read_text(encoding="utf-8")
    assert "body { color: red; }" in page
    assert CUSTOM_CSS_PLACEHOLDER not in page
    assert result.custom_css_applied is True
    assert steps[0] == "Read custom css file!"


def test_unreadable_custom_css_aborts(petstore_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "index.html"
    with pytest.raises(InvalidConfigurationError) as exc:
        run(RenderService(), petstore_file, out, custom_css_path=str(tmp_path / "missing.css"))
    assert exc.value.code == "CSS_READ_FAILED"
    assert not out.exists()


def test_missing_source(tmp_path: Path) -> None:
    out = tmp_path / "index.html"
    with pytest.raises(InputError) as exc:
        run(RenderService(), tmp_path / "nope.yaml", out)
    assert exc.value.code == "SOURCE_NOT_FOUND"
    assert not out.exists()


def test_unparseable_source(tmp_path: Path) -> None:
    source = tmp_path / "broken.yaml"
    source.write_text("openapi: [3.0.0\ninfo: {", encoding="utf-8")
    out = tmp_path / "index.html"
    with pytest.raises(InputError) as exc:
        run(RenderService(), source, out)
    assert exc.value.code == "PARSE_ERROR"
    assert not out.exists()


def test_conversion_failure_is_wrapped(tmp_path: Path) -> None:
    source = tmp_path / "plain.yaml"
    source.write_text("title: not an api\n", encoding="utf-8")
    with pytest.raises(CollaboratorError) as exc:
        run(RenderService(), source, tmp_path / "index.html")
    assert exc.value.code == "CONVERSION_FAILED"


def test_render_failure_is_wrapped(petstore_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "index.html"
    with pytest.raises(CollaboratorError) as exc:
        run(RenderService(), petstore_file, out, custom_logo=str(tmp_path / "missing.png"))
    assert exc.value.code == "RENDER_FAILED"
    assert not out.exists()


def test_write_failure(petstore_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "taken"
    out.mkdir()
    with pytest.raises(OutputError) as exc:
        run(RenderService(), petstore_file, out)
    assert exc.value.code == "WRITE_FAILED"


def test_runs_are_byte_identical(petstore_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "index.html"
    run(RenderService(), petstore_file, out)
    first = out.read_bytes()
    run(RenderService(), petstore_file, out)
    assert out.read_bytes() == first


def test_run_log_records_success_and_failure(petstore_file: Path, tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "runs.jsonl"
    service = RenderService(build_config(log_file))
    run(service, petstore_file, tmp_path / "index.html")
    with pytest.raises(InputError):
        run(service, tmp_path / "missing.yaml", tmp_path / "other.html")
    entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert [entry["status"] for entry in entries] == ["success", "failure"]
    assert entries[0]["error_code"] is None
    assert entries[0]["size_bytes"] > 0
    assert set(entries[0]["timings"]) == {"read_ms", "parse_ms", "convert_ms", "render_ms", "write_ms"}
    assert entries[1]["error_code"] == "SOURCE_NOT_FOUND"


def test_apply_custom_css_is_case_insensitive_and_optional() -> None:
    page = "<style>/* Place Your Custom CSS Overrides Here */</style>"
    assert apply_custom_css(page, "a { b: c; }") == "<style>a { b: c; }</style>"
    assert apply_custom_css("<p>no marker</p>", "a { b: c; }") == "<p>no marker</p>"


def test_parse_document_accepts_json() -> None:
    assert parse_document('{"openapi": "3.0.0", "info": {"title": "x"}}')["openapi"] == "3.0.0"
    with pytest.raises(InputError):
        parse_document("- just\n- a list\n")


def test_parse_document_accepts_tab_indented_json() -> None:
    document = parse_document('{\n\t"openapi": "3.0.0",\n\t"info": {\n\t\t"title": "Tabs",\n\t\t"version": "1"\n\t}\n}\n')
    assert document["info"]["title"] == "Tabs"
    with pytest.raises(InputError) as exc:
        parse_document("{\n\t\"openapi\": ")
    assert exc.value.code == "PARSE_ERROR"
