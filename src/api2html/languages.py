"""Code sample languages offered as tabs in the rendered page."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from .errors import InvalidConfigurationError


@dataclass(frozen=True, slots=True)
class LanguageTable:
    """Immutable, ordered mapping of language key to display label."""

    entries: tuple[tuple[str, str], ...]

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.label(key) is not None

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(key for key, _ in self.entries)

    def label(self, key: str) -> str | None:
        wanted = key.strip().lower()
        for candidate, label in self.entries:
            if candidate == wanted:
                return label
        return None

    def select(self, requested: Iterable[str] | None) -> tuple[tuple[str, str], ...]:
        """Return the language tabs for *requested* keys.

        Keys are matched case-insensitively and kept in the requested order.
        Blank keys are skipped and repeated keys collapse onto their first
        occurrence. When nothing usable is requested the whole table is
        returned in declaration order.
        """

        if requested is None:
            return self.entries
        selected: list[tuple[str, str]] = []
        seen: set[str] = set()
        for raw in requested:
            key = raw.strip().lower()
            if not key:
                continue
            label = self.label(key)
            if label is None:
                raise InvalidConfigurationError(
                    "INVALID_LANGUAGE",
                    f"Invalid language '{raw.strip()}'. Please specify valid languages "
                    f"(such as {', '.join(self.keys)}).",
                )
            if key in seen:
                continue
            seen.add(key)
            selected.append((key, label))
        return tuple(selected) or self.entries


DEFAULT_LANGUAGES = LanguageTable(
    entries=(
        ("shell", "Shell"),
        ("http", "HTTP"),
        ("javascript", "JavaScript"),
        ("javascript--nodejs", "Node.js"),
        ("ruby", "Ruby"),
        ("python", "Python"),
        ("java", "Java"),
        ("go", "Go"),
        ("php", "PHP"),
    )
)


__all__ = ["LanguageTable", "DEFAULT_LANGUAGES"]
