from pathlib import Path

from api2html.constraint import CUSTOM_CSS_PLACEHOLDER
from api2html.models import RenderOptions
from api2html.renderer import render, render_html
from api2html.renderer.frontmatter import language_tabs, split_front_matter
from api2html.renderer.highlight import resolve_style

SLATE = """\
---
title: Sample API 1.0
language_tabs:
  - shell: Shell
  - python: Python
toc_footers: []
includes: []
search: true
highlight_theme: darkula
headingLevel: 2
---

# Sample API {#sample-api}

## listThings {#listthings}

```shell
curl -X GET https://api.example.com/things
```

```python
import requests
```

### Responses {#listthings-responses}

|Status|Meaning|
|---|---|
|200|OK|
"""


def test_render_html_inlines_everything():
    page = render_html(SLATE, RenderOptions())
    assert page.startswith("<!DOCTYPE html>")
    assert "<title>Sample API 1.0</title>" in page
    assert 'data-highlight-theme="darkula"' in page
    assert "<script src" not in page
    assert "<link" not in page
    assert 'data-language-name="shell"' in page
    assert 'data-language-name="python"' in page
    assert 'class="language-shell"' in page
    assert 'id="input-search"' in page


def test_toc_respects_heading_level():
    page = render_html(SLATE, RenderOptions())
    assert 'href="#listthings"' in page
    assert 'href="#listthings-responses"' not in page


def test_custom_css_block_contains_placeholder():
    assert CUSTOM_CSS_PLACEHOLDER not in render_html(SLATE, RenderOptions())
    page = render_html(SLATE, RenderOptions(custom_css=True))
    assert CUSTOM_CSS_PLACEHOLDER in page


def test_logo_embedded_as_data_uri(tmp_path: Path):
    logo = tmp_path / "logo.png"
    logo.write_bytes(b"\x89PNG\r\n\x1a\nfake")
    page = render_html(SLATE, RenderOptions(logo=str(logo), logo_url="https://example.com"))
    assert 'src="data:image/png;base64,' in page
    assert '<a href="https://example.com"><img' in page


def test_includes_are_appended(tmp_path: Path):
    include = tmp_path / "errors.md"
    include.write_text("# Errors\n\nThe API uses standard status codes.\n", encoding="utf-8")
    source = SLATE.replace("includes: []", f"includes:\n  - {include}")
    page = render_html(source, RenderOptions())
    assert "The API uses standard status codes." in page


def test_script_tags_in_markdown_are_neutralized():
    page = render_html(SLATE + "\n<script>alert(1)</script>\n", RenderOptions())
    assert "<script>alert(1)" not in page
    assert "&lt;script>alert(1)&lt;/script>" in page


def test_render_reports_errors_through_callback(tmp_path: Path):
    outcomes = []
    render(SLATE, RenderOptions(logo=str(tmp_path / "missing.png")), lambda err, html: outcomes.append((err, html)))
    error, page = outcomes[0]
    assert isinstance(error, FileNotFoundError)
    assert page is None


def test_render_passes_page_to_callback():
    outcomes = []
    render(SLATE, RenderOptions(), lambda err, html: outcomes.append((err, html)))
    assert outcomes[0][0] is None
    assert "Sample API" in outcomes[0][1]


def test_rendering_is_deterministic():
    assert render_html(SLATE, RenderOptions()) == render_html(SLATE, RenderOptions())


def test_front_matter_helpers():
    front, body = split_front_matter(SLATE)
    assert language_tabs(front) == [("shell", "Shell"), ("python", "Python")]
    assert body.lstrip().startswith("# Sample API")
    assert split_front_matter("# plain") == ({}, "# plain")
    dated, _ = split_front_matter("---\nupdated: 2020-01-01\n---\nbody")
    assert dated == {"updated": "2020-01-01"}


def test_resolve_style_maps_highlightjs_names():
    assert resolve_style("darkula") == "monokai"
    assert resolve_style("Zenburn") == "zenburn"
    assert resolve_style("github") == "friendly"
    assert resolve_style("no-such-theme") == "monokai"
