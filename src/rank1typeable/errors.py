"""Unification failures and Rust-style colored diagnostic rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rank1typeable.types import TypeRep


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass
class Diagnostic:
    """A single diagnostic message, optionally pointing into a type expression."""

    severity: Severity
    code: str
    message: str
    source: str | None = None
    column: int | None = None  # 1-indexed column into ``source``
    width: int = 1
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        sev = diag.severity
        color = _COLORS[sev]

        # Header: error[E201]: message
        lines.append(
            f"{self._c(color)}{sev.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        if diag.source is not None:
            lines.append(f"  {self._c(_BLUE)}|{self._c(_RESET)}")
            lines.append(f"  {self._c(_BLUE)}|{self._c(_RESET)} {diag.source}")
            if diag.column is not None:
                padding = " " * (diag.column - 1)
                carets = "^" * max(1, diag.width)
                lines.append(
                    f"  {self._c(_BLUE)}|{self._c(_RESET)} "
                    f"{padding}{self._c(color)}{carets}{self._c(_RESET)}"
                )

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)


# ── Unification failures ────────────────────────────────────────


class UnifyErrorKind(Enum):
    MISMATCH = "mismatch"
    OCCURS_CHECK = "occurs check"


_CODES = {
    UnifyErrorKind.MISMATCH: "E201",
    UnifyErrorKind.OCCURS_CHECK: "E202",
}


@dataclass(frozen=True)
class UnifyError:
    """Why two types failed to unify. Returned, never raised."""

    kind: UnifyErrorKind
    message: str
    left: TypeRep
    right: TypeRep

    @classmethod
    def mismatch(cls, left: TypeRep, right: TypeRep) -> UnifyError:
        return cls(UnifyErrorKind.MISMATCH, f"Cannot unify {left} and {right}", left, right)

    @classmethod
    def occurs_check(cls, variable: TypeRep, right: TypeRep) -> UnifyError:
        return cls(
            UnifyErrorKind.OCCURS_CHECK,
            f"Occurs check: {variable} occurs in {right}",
            variable,
            right,
        )

    @property
    def code(self) -> str:
        return _CODES[self.kind]

    def to_diagnostic(self, *notes: str) -> Diagnostic:
        return Diagnostic(
            severity=Severity.ERROR,
            code=self.code,
            message=self.message,
            notes=list(notes),
        )

    def __str__(self) -> str:
        return self.message


# ── Input errors ────────────────────────────────────────────────


class TypeExprError(Exception):
    """A type expression could not be parsed; carries the diagnostics."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        messages = [d.message for d in diagnostics]
        super().__init__(f"{len(diagnostics)} error(s): {'; '.join(messages)}")


class DecodeError(ValueError):
    """Bytes that are not a well-formed encoded type representation."""

    code = "E300"

    def __init__(self, message: str, offset: int) -> None:
        self.offset = offset
        super().__init__(f"{message} (at byte {offset})")

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(severity=Severity.ERROR, code=self.code, message=str(self))
