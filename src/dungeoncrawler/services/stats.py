from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from dungeoncrawler.engine.settings import CUSTOM_MODE, PRESETS
from dungeoncrawler.services.storage import StorageError, load_json, validate_json, write_json


class StatsError(RuntimeError):
    pass


def _empty_mode_wins() -> dict[str, int]:
    counts = {name: 0 for name in PRESETS}
    counts[CUSTOM_MODE] = 0
    return counts


@dataclass
class PlayerStats:
    wins: int = 0
    floors_traversed: int = 0
    mode_wins: dict[str, int] = field(default_factory=_empty_mode_wins)

    def record_win(self, mode: str, floors: int) -> None:
        if floors < 0:
            raise StatsError("floors must not be negative")
        self.wins += 1
        self.floors_traversed += floors
        self.mode_wins[mode] = self.mode_wins.get(mode, 0) + 1

    def record_floors(self, floors: int) -> None:
        if floors < 0:
            raise StatsError("floors must not be negative")
        self.floors_traversed += floors

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "PlayerStats":
        wins = d.get("wins", 0)
        floors = d.get("floors_traversed", 0)
        mode_wins = _empty_mode_wins()
        raw_modes = d.get("mode_wins", {})
        if isinstance(raw_modes, dict):
            for k, v in raw_modes.items():
                if isinstance(k, str) and isinstance(v, int):
                    mode_wins[k] = v
        return PlayerStats(
            wins=wins if isinstance(wins, int) else 0,
            floors_traversed=floors if isinstance(floors, int) else 0,
            mode_wins=mode_wins,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "wins": self.wins,
            "floors_traversed": self.floors_traversed,
            "mode_wins": dict(self.mode_wins),
        }


class StatsService:
    def __init__(self, path: Path, schema_dir: Path) -> None:
        self._path = path
        self._schema_path = schema_dir / "stats.schema.json"
        self.stats = self._load_or_create()

    def _load_or_create(self) -> PlayerStats:
        if not self._path.exists():
            return PlayerStats()
        raw = load_json(self._path)
        try:
            validate_json(raw, load_json(self._schema_path), context=str(self._path))
        except StorageError as e:
            raise StatsError(str(e)) from e
        if not isinstance(raw, dict):
            raise StatsError("Stats file must be an object")
        return PlayerStats.from_dict(raw)

    def save(self) -> None:
        write_json(self._path, self.stats.to_dict())

    def record_result(self, outcome: str, mode: str, floor_number: int) -> None:
        if outcome == "win":
            self.stats.record_win(mode, floor_number)
        else:
            self.stats.record_floors(floor_number)
        self.save()
