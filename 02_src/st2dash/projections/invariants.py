"""Read-time rendering of the invariant violation logs."""

from dataclasses import dataclass
from typing import Callable, Sequence

from ..models import (
    EpochViolation,
    InvariantKind,
    MessageViolation,
    OperatorViolation,
    Violation,
)
from ..stores import InvariantSnapshot

NANOS_PER_MS = 1_000_000
NO_VIOLATIONS = "No invariants violated."

TITLES = {
    InvariantKind.EPOCH: "Epoch Duration",
    InvariantKind.OPERATOR: "Operator Duration",
    InvariantKind.MESSAGE: "Message Duration",
}


def to_ms(nanos: int) -> str:
    """Milliseconds without trailing zeros (12000000 -> "12")."""
    return f"{nanos / NANOS_PER_MS:.6f}".rstrip("0").rstrip(".")


def format_epoch(v: EpochViolation) -> str:
    return f"Epoch {v.start.epoch} took {v.duration / NANOS_PER_MS:.2f}ms."


def format_operator(v: OperatorViolation) -> str:
    src = v.first.source
    op = "?" if v.first.operator_id is None else v.first.operator_id
    return (
        f"Epoch {src.epoch} | w{src.worker} @ {src.timestamp}: "
        f"Operator {op} ({v.first.kind.value}) took {v.duration / NANOS_PER_MS:.2f}ms."
    )


def format_message(v: MessageViolation) -> str:
    src = v.message.source
    dst = v.message.destination
    return (
        f"Epoch {src.epoch} | w{src.worker} @ {src.timestamp} -> w{dst.worker} @ {dst.timestamp}: "
        f"{v.message.kind.value} took {v.duration / NANOS_PER_MS:.2f}ms."
    )


_FORMATTERS: dict[InvariantKind, Callable] = {
    InvariantKind.EPOCH: format_epoch,
    InvariantKind.OPERATOR: format_operator,
    InvariantKind.MESSAGE: format_message,
}


def by_duration(log: Sequence[Violation]) -> list[Violation]:
    """Longest first. The log itself stays in arrival order."""
    return sorted(log, key=lambda v: v.duration, reverse=True)


@dataclass
class InvariantPanel:
    """One rendered violation log."""

    kind: InvariantKind
    title: str
    max_ms: str | None
    lines: list[str]

    @property
    def text(self) -> str:
        return "\n".join(self.lines) if self.lines else NO_VIOLATIONS


def invariant_panels(snapshot: InvariantSnapshot) -> list[InvariantPanel]:
    panels = []
    for kind in InvariantKind:
        max_duration = snapshot.max_duration(kind)
        max_ms = None if max_duration is None else to_ms(max_duration)
        title = TITLES[kind] if max_ms is None else f"{TITLES[kind]} (max: {max_ms}ms)"
        format_line = _FORMATTERS[kind]
        panels.append(
            InvariantPanel(
                kind=kind,
                title=title,
                max_ms=max_ms,
                lines=[format_line(v) for v in by_duration(snapshot.log(kind))],
            )
        )
    return panels
