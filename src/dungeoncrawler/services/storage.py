from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from jsonschema import Draft202012Validator

from dungeoncrawler.engine.game import Game
from dungeoncrawler.engine.serialize import game_from_dict, game_to_dict


class StorageError(RuntimeError):
    pass


def load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise StorageError(f"Missing file: {path}") from e
    except json.JSONDecodeError as e:
        raise StorageError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.absolute_path))
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise StorageError("\n".join(lines))


def write_json(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


class SaveGameStore:
    """Single-slot save file: settings, state and undo history of one game."""

    def __init__(self, path: Path, schema_dir: Path) -> None:
        self._path = path
        self._schema_path = schema_dir / "savegame.schema.json"
        self._schema: object | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _get_schema(self) -> object:
        if self._schema is None:
            self._schema = load_json(self._schema_path)
        return self._schema

    def exists(self) -> bool:
        return self._path.exists()

    def save(self, game: Game) -> None:
        data = game_to_dict(game)
        data["saved_at"] = datetime.now(tz=timezone.utc).isoformat()
        write_json(self._path, data)

    def load(self) -> Game | None:
        if not self._path.exists():
            return None
        raw = load_json(self._path)
        validate_json(raw, self._get_schema(), context=str(self._path))
        if not isinstance(raw, dict):
            raise StorageError("Save file must be an object")
        try:
            return game_from_dict(raw)
        except ValueError as e:
            raise StorageError(f"Corrupt save file {self._path}: {e}") from e

    def clear(self) -> None:
        if self._path.exists():
            self._path.unlink()
