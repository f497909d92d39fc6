"""
Diagnostics returned alongside every configure and read result.

Problems are never raised across a provider or data source boundary. They are
accumulated as :class:`Diagnostic` entries in a :class:`Diagnostics` collector
and handed back to the host, which decides whether the run fails. A result that
carries at least one error-severity diagnostic must be treated as void.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

PathStep = Union[str, int]


class Severity(str, Enum):
    """Severity levels understood by the host."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class AttributePath:
    """
    Pointer into a schema tree.

    Steps are attribute names (``str``) or list indexes (``int``), e.g.
    ``AttributePath.root("movies").index(0).attr("title")`` renders as
    ``movies[0].title``.
    """

    steps: Tuple[PathStep, ...] = ()

    @classmethod
    def root(cls, name: str) -> "AttributePath":
        return cls((name,))

    def attr(self, name: str) -> "AttributePath":
        return AttributePath((*self.steps, name))

    def index(self, position: int) -> "AttributePath":
        return AttributePath((*self.steps, position))

    def __str__(self) -> str:
        rendered = ""
        for step in self.steps:
            if isinstance(step, int):
                rendered += f"[{step}]"
            elif rendered:
                rendered += f".{step}"
            else:
                rendered = step
        return rendered


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single structured problem report."""

    severity: Severity
    summary: str
    detail: str = ""
    attribute_path: Optional[AttributePath] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity.value,
            "summary": self.summary,
            "detail": self.detail,
            "attribute": str(self.attribute_path) if self.attribute_path else None,
        }


@dataclass(slots=True)
class Diagnostics:
    """Ordered, append-only collection of :class:`Diagnostic` entries."""

    _entries: List[Diagnostic] = field(default_factory=list)

    def add_error(self, summary: str, detail: str = "") -> None:
        self._entries.append(Diagnostic(Severity.ERROR, summary, detail))

    def add_warning(self, summary: str, detail: str = "") -> None:
        self._entries.append(Diagnostic(Severity.WARNING, summary, detail))

    def add_attribute_error(self, path: AttributePath, summary: str, detail: str = "") -> None:
        self._entries.append(Diagnostic(Severity.ERROR, summary, detail, path))

    def extend(self, other: Iterable[Diagnostic]) -> None:
        self._entries.extend(other)

    def has_error(self) -> bool:
        return any(entry.severity is Severity.ERROR for entry in self._entries)

    def errors(self) -> List[Diagnostic]:
        return [entry for entry in self._entries if entry.severity is Severity.ERROR]

    def warnings(self) -> List[Diagnostic]:
        return [entry for entry in self._entries if entry.severity is Severity.WARNING]

    def to_list(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self._entries]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
