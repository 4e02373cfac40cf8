from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Mapping

EventType = Literal[
    "game_started",
    "game_restarted",
    "game_resumed",
    "action_resolved",
    "undo",
    "game_ended",
    "save_discarded",
]


@dataclass
class TelemetryService:
    """Append-only JSON Lines log of game events.

    Every record carries the id of the process-level session that wrote it, so
    runs sharing one userdata directory can be told apart.
    """

    path: Path
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def log(self, event_type: EventType, payload: Mapping[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        record = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "session": self.session_id,
            "type": event_type,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")

    def read_events(self, event_type: EventType | None = None) -> list[dict[str, object]]:
        if not self.path.exists():
            return []
        events: list[dict[str, object]] = []
        for line in self.path.read_text(encoding="utf-8").splitlines():
            if not line.strip():
                continue
            record = json.loads(line)
            if event_type is None or record.get("type") == event_type:
                events.append(record)
        return events
