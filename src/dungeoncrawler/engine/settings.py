from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Literal, Mapping, get_args

WeaponDegradation = Literal["strict", "equal", "none"]
HealingMode = Literal["once", "unlimited"]
DifficultyMode = Literal["brutal", "hard", "normal", "easy", "casual", "custom"]

DEGRADATION_MODES: tuple[str, ...] = get_args(WeaponDegradation)
HEALING_MODES: tuple[str, ...] = get_args(HealingMode)
CUSTOM_MODE = "custom"


class SettingsError(RuntimeError):
    pass


@dataclass(frozen=True)
class GameSettings:
    """Rule variants for one game. The defaults are the brutal preset."""

    max_health: int = 20
    weapon_degradation: WeaponDegradation = "strict"
    max_runs: int = 1
    healing_mode: HealingMode = "once"
    include_diamond_royals: bool = False
    include_heart_royals: bool = False
    remove_ace_monsters: bool = False

    def validate(self) -> list[str]:
        problems: list[str] = []
        if self.max_health < 1:
            problems.append("max_health must be at least 1")
        if self.max_runs < 0:
            problems.append("max_runs must not be negative")
        if self.weapon_degradation not in DEGRADATION_MODES:
            problems.append(f"unknown weapon_degradation: {self.weapon_degradation}")
        if self.healing_mode not in HEALING_MODES:
            problems.append(f"unknown healing_mode: {self.healing_mode}")
        return problems

    def to_dict(self) -> dict[str, object]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "GameSettings":
        base = GameSettings()
        kwargs: dict[str, object] = {}
        for f in fields(GameSettings):
            default = getattr(base, f.name)
            v = d.get(f.name, default)
            # bool is an int subclass; keep the two apart
            if isinstance(default, bool):
                if not isinstance(v, bool):
                    raise SettingsError(f"Expected bool for {f.name}")
            elif isinstance(default, int):
                if not isinstance(v, int) or isinstance(v, bool):
                    raise SettingsError(f"Expected int for {f.name}")
            elif not isinstance(v, str):
                raise SettingsError(f"Expected string for {f.name}")
            kwargs[f.name] = v
        settings = GameSettings(**kwargs)  # type: ignore[arg-type]
        problems = settings.validate()
        if problems:
            raise SettingsError("Invalid settings: " + "; ".join(problems))
        return settings


PRESETS: dict[str, GameSettings] = {
    "brutal": GameSettings(),
    "hard": GameSettings(max_health=25, max_runs=2),
    "normal": GameSettings(
        max_health=25,
        weapon_degradation="equal",
        max_runs=2,
        remove_ace_monsters=True,
    ),
    "easy": GameSettings(
        max_health=30,
        weapon_degradation="equal",
        max_runs=3,
        healing_mode="unlimited",
        include_diamond_royals=True,
        remove_ace_monsters=True,
    ),
    "casual": GameSettings(
        max_health=35,
        weapon_degradation="none",
        max_runs=999,
        healing_mode="unlimited",
        include_diamond_royals=True,
        include_heart_royals=True,
        remove_ace_monsters=True,
    ),
}

DEFAULT_SETTINGS = PRESETS["brutal"]


def preset(name: str) -> GameSettings:
    try:
        return PRESETS[name]
    except KeyError as e:
        raise SettingsError(f"Unknown difficulty preset: {name}") from e


def difficulty_mode(settings: GameSettings) -> str:
    """Name of the preset equal to `settings` in all seven fields, else "custom"."""
    for name, p in PRESETS.items():
        if p == settings:
            return name
    return CUSTOM_MODE
