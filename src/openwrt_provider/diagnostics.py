"""Accumulated diagnostics.

Every stage of configure/read appends to a ``Diagnostics`` report instead of
raising. Callers check ``has_error()`` after each step that can fail and stop
early; warnings never stop execution.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, Union

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Diagnostic severity."""
    ERROR = "error"
    WARNING = "warning"


class ErrorKind(str, Enum):
    """Category of failure behind an error diagnostic."""
    VALIDATION = "validation"
    UNRESOLVED_CONFIG = "unresolved_config"
    AUTHENTICATION = "authentication"
    BACKEND_QUERY = "backend_query"
    CAPABILITY_TYPE = "capability_type"


@dataclass(frozen=True)
class Diagnostic:
    """A single error or warning."""
    severity: Severity
    summary: str
    detail: str = ""
    attribute_path: Optional[str] = None
    kind: Optional[ErrorKind] = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "summary": self.summary,
            "detail": self.detail,
            "attribute_path": self.attribute_path,
            "kind": self.kind.value if self.kind else None,
        }

    def __str__(self) -> str:
        where = f" [{self.attribute_path}]" if self.attribute_path else ""
        return f"{self.severity.value.upper()}{where}: {self.summary}: {self.detail}"


class Diagnostics:
    """Ordered, appendable collection of diagnostics."""

    def __init__(self, entries: Optional[Iterable[Diagnostic]] = None):
        self._entries: list[Diagnostic] = list(entries or [])

    def append(self, *items: Union[Diagnostic, "Diagnostics"]) -> None:
        """Merge diagnostics in arrival order."""
        for item in items:
            if isinstance(item, Diagnostics):
                self._entries.extend(item)
            else:
                self._entries.append(item)

    def add_error(
        self,
        summary: str,
        detail: str = "",
        attribute_path: Optional[str] = None,
        kind: Optional[ErrorKind] = None,
    ) -> None:
        logger.debug(f"error diagnostic: {summary}: {detail}")
        self._entries.append(Diagnostic(Severity.ERROR, summary, detail, attribute_path, kind))

    def add_warning(
        self,
        summary: str,
        detail: str = "",
        attribute_path: Optional[str] = None,
    ) -> None:
        self._entries.append(Diagnostic(Severity.WARNING, summary, detail, attribute_path))

    def add_attribute_error(self, path: str, summary: str, detail: str) -> None:
        """Add a schema validation error tied to an attribute path."""
        self.add_error(summary, detail, attribute_path=path, kind=ErrorKind.VALIDATION)

    def has_error(self) -> bool:
        return any(d.is_error for d in self._entries)

    def errors(self) -> list[Diagnostic]:
        return [d for d in self._entries if d.is_error]

    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._entries if not d.is_error]

    def to_list(self) -> list[dict]:
        return [d.to_dict() for d in self._entries]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> Diagnostic:
        return self._entries[index]

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"Diagnostics(errors={len(self.errors())}, warnings={len(self.warnings())})"
