from pathlib import Path

from api2html.utils import atomic_write, load_yaml, looks_like_url, normalize_newlines, slugify, split_list


def test_slugify_basic() -> None:
    assert slugify("Hello World!.pdf") == "hello-world-pdf"
    assert slugify("  ") == "section"


def test_normalize_newlines_keeps_hard_breaks() -> None:
    text = "line1\r\nline2  \n   \nline3"
    assert normalize_newlines(text) == "line1\nline2  \n\nline3\n"


def test_split_list_strips_and_drops_blanks() -> None:
    assert split_list(" a.md, ,b.md,") == ("a.md", "b.md")
    assert split_list(None) == ()


def test_atomic_write_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "page.html"
    atomic_write(target, "<p>hi</p>")
    assert target.read_text(encoding="utf-8") == "<p>hi</p>"
    assert [p.name for p in target.parent.iterdir()] == ["page.html"]


def test_looks_like_url() -> None:
    assert looks_like_url("https://example.com/api.yaml")
    assert not looks_like_url("specs/api.yaml")


def test_load_yaml_keeps_dates_as_strings() -> None:
    assert load_yaml("day: 2020-01-01\nat: 2020-01-01T10:00:00Z\ncount: 3\n") == {
        "day": "2020-01-01",
        "at": "2020-01-01T10:00:00Z",
        "count": 3,
    }
