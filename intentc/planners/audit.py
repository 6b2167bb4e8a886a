from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Sequence, Tuple

from intentc.models import AuditEntry


class AuditLogger:
    """Append-only decision log for a single planning call."""

    def __init__(self) -> None:
        self._entries: list[AuditEntry] = []

    def record(self, stage: str, decision: str, reasoning: str, alternatives: Iterable[str] = ()) -> AuditEntry:
        entry = AuditEntry(
            timestamp=datetime.now(timezone.utc),
            stage=stage,
            decision=decision,
            reasoning=reasoning,
            alternatives=tuple(alternatives),
        )
        self._entries.append(entry)
        return entry

    def append(self, entry: AuditEntry) -> None:
        self._entries.append(entry)

    def entries(self) -> Tuple[AuditEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def render_audit_log(entries: Sequence[AuditEntry]) -> str:
    lines: list[str] = []
    for idx, entry in enumerate(entries, 1):
        lines.append(f"{idx}. [{entry.stage}] {entry.decision}")
        lines.append(f"   why: {entry.reasoning}")
        if entry.alternatives:
            lines.append(f"   alternatives: {', '.join(entry.alternatives)}")
        lines.append(f"   at: {entry.timestamp.isoformat()}")
    return "\n".join(lines)
