"""Diagnostic messages recorded while preparing and packaging a project.

Preparing a target may inject defaults (a blank costume, a first broadcast)
and packaging may fail to locate asset bytes. Neither stops the build, so they
are collected per target and reported by the caller.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class DiagnosticLevel(Enum):
    """Severity level for diagnostic messages."""
    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Info"


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    level: DiagnosticLevel
    message: str
    target: str

    def __str__(self) -> str:
        return f"{self.level.value}: {self.message}: Target '{self.target}'"


@dataclass
class DiagnosticContext:
    """Diagnostics recorded for one target."""
    target_name: str = "Stage"
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def add(self, level: DiagnosticLevel, message: str) -> None:
        """Record a message; repeating the same message for this target is a no-op."""
        diagnostic = Diagnostic(level=level, message=message, target=self.target_name)
        if diagnostic not in self.diagnostics:
            self.diagnostics.append(diagnostic)

    def error(self, message: str) -> None:
        self.add(DiagnosticLevel.ERROR, message)

    def warning(self, message: str) -> None:
        self.add(DiagnosticLevel.WARNING, message)

    def info(self, message: str) -> None:
        self.add(DiagnosticLevel.INFO, message)

    def has_errors(self) -> bool:
        return any(d.level == DiagnosticLevel.ERROR for d in self.diagnostics)

    def has_warnings(self) -> bool:
        return any(d.level == DiagnosticLevel.WARNING for d in self.diagnostics)

    def clear(self) -> None:
        self.diagnostics.clear()


class DiagnosticCollector:
    """Collector for diagnostics across every target of a project."""

    def __init__(self) -> None:
        self.all_diagnostics: List[Diagnostic] = []

    def add_context_diagnostics(self, ctx: DiagnosticContext) -> None:
        """Add all diagnostics from a context."""
        self.all_diagnostics.extend(ctx.diagnostics)

    def of_level(self, level: DiagnosticLevel) -> List[Diagnostic]:
        return [d for d in self.all_diagnostics if d.level == level]

    def has_errors(self) -> bool:
        return bool(self.of_level(DiagnosticLevel.ERROR))

    def has_warnings(self) -> bool:
        return bool(self.of_level(DiagnosticLevel.WARNING))

    def clear(self) -> None:
        self.all_diagnostics.clear()

    def print_all(self) -> None:
        """Print all diagnostics to stdout."""
        for diag in self.all_diagnostics:
            print(diag)

    def summary(self) -> str:
        """Return a summary of diagnostics."""
        errors = len(self.of_level(DiagnosticLevel.ERROR))
        warnings = len(self.of_level(DiagnosticLevel.WARNING))
        notes = len(self.of_level(DiagnosticLevel.INFO))
        parts = []
        if errors:
            parts.append(f"{errors} error{'s' if errors != 1 else ''}")
        if warnings:
            parts.append(f"{warnings} warning{'s' if warnings != 1 else ''}")
        if notes:
            parts.append(f"{notes} note{'s' if notes != 1 else ''}")
        return ", ".join(parts) if parts else "No issues"
