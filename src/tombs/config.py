from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "TOMBS_"
# one lettered menu row per slot, a-z
MAX_INVENTORY = 26


def _default_monster_weights() -> Dict[str, int]:
    return {"orc": 80, "troll": 20}


def _default_item_weights() -> Dict[str, int]:
    return {"heal": 70, "lightning": 10, "confuse": 10}


@dataclass
class GenerationSettings:
    """Parameters of the rooms-and-tunnels dungeon generator.

    These travel with the saved game, so a loaded run keeps generating levels
    with the settings it was started with.
    """

    width: int = 80
    height: int = 43
    max_rooms: int = 30
    room_min_size: int = 6
    room_max_size: int = 10
    max_room_monsters: int = 3
    max_room_items: int = 2
    monster_weights: Dict[str, int] = field(default_factory=_default_monster_weights)
    item_weights: Dict[str, int] = field(default_factory=_default_item_weights)

    def __post_init__(self) -> None:
        if self.room_min_size < 3:
            raise ValueError("room_min_size must be >= 3 to leave a carvable interior")
        if self.room_max_size < self.room_min_size:
            raise ValueError("room_max_size must be >= room_min_size")
        if self.width <= self.room_max_size or self.height <= self.room_max_size:
            raise ValueError("map must be larger than the biggest room")
        if self.max_rooms < 1:
            raise ValueError("max_rooms must be >= 1")
        if self.max_room_monsters < 0 or self.max_room_items < 0:
            raise ValueError("per-room spawn counts must be >= 0")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationSettings":
        defaults = cls()
        return cls(
            width=int(data.get("width", defaults.width)),
            height=int(data.get("height", defaults.height)),
            max_rooms=int(data.get("max_rooms", defaults.max_rooms)),
            room_min_size=int(data.get("room_min_size", defaults.room_min_size)),
            room_max_size=int(data.get("room_max_size", defaults.room_max_size)),
            max_room_monsters=int(data.get("max_room_monsters", defaults.max_room_monsters)),
            max_room_items=int(data.get("max_room_items", defaults.max_room_items)),
            monster_weights={
                str(k): int(v) for k, v in data.get("monster_weights", defaults.monster_weights).items()
            },
            item_weights={str(k): int(v) for k, v in data.get("item_weights", defaults.item_weights).items()},
        )


@dataclass
class GameConfig:
    """Central game configuration.

    - generation: dungeon generator settings (persisted with the save).
    - torch_radius / fov_light_walls: parameters handed to the visibility oracle.
    - level_up_base / level_up_factor: xp threshold is base + level * factor.
    - item tuning: heal amount, lightning damage/range, confusion range/duration.
    - seed: optional RNG seed for reproducible runs.
    """

    generation: GenerationSettings = field(default_factory=GenerationSettings)
    torch_radius: int = 10
    fov_light_walls: bool = True
    level_up_base: int = 200
    level_up_factor: int = 150
    inventory_capacity: int = 26
    heal_amount: int = 4
    lightning_damage: int = 40
    lightning_range: int = 5
    confuse_range: int = 8
    confuse_num_turns: int = 10
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.torch_radius < 0:
            raise ValueError("torch_radius must be >= 0")
        if not 1 <= self.inventory_capacity <= MAX_INVENTORY:
            raise ValueError(f"inventory_capacity must be between 1 and {MAX_INVENTORY}")

    def level_up_threshold(self, level: int) -> int:
        return self.level_up_base + level * self.level_up_factor

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["generation"] = self.generation.to_dict()
        return data

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "GameConfig":
        """Build a config from a mapping. Missing fields fall back to defaults."""
        cfg = cls()
        if "generation" in raw:
            cfg.generation = GenerationSettings.from_dict(raw["generation"] or {})
        for name in (
            "torch_radius",
            "level_up_base",
            "level_up_factor",
            "inventory_capacity",
            "heal_amount",
            "lightning_damage",
            "lightning_range",
            "confuse_range",
            "confuse_num_turns",
        ):
            if name in raw:
                setattr(cfg, name, int(raw[name]))
        if "fov_light_walls" in raw:
            cfg.fov_light_walls = bool(raw["fov_light_walls"])
        if raw.get("seed") is not None:
            cfg.seed = int(raw["seed"])
        cfg.__post_init__()
        return cfg

    @classmethod
    def from_file(cls, path: Path) -> "GameConfig":
        """Load configuration from a JSON or YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in (".yaml", ".yml"):
            raw = yaml.safe_load(text) or {}
        else:
            raw = json.loads(text)
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {path} must contain a mapping at the top level")
        logger.debug("Loaded config from %s", path)
        return cls.from_dict(raw)

    def to_file(self, path: Path) -> None:
        """Persist configuration as JSON, or YAML when the suffix asks for it."""
        path = Path(path)
        with path.open("w", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                yaml.safe_dump(self.to_dict(), f, sort_keys=True)
            else:
                json.dump(self.to_dict(), f, indent=2, sort_keys=True)

    def apply_env(self, environ: Optional[Dict[str, str]] = None) -> "GameConfig":
        """Apply TOMBS_* environment overrides in place and return self."""
        env = os.environ if environ is None else environ
        overrides = {
            "SEED": ("seed", None),
            "TORCH_RADIUS": ("torch_radius", None),
            "MAP_WIDTH": ("width", self.generation),
            "MAP_HEIGHT": ("height", self.generation),
            "MAX_ROOMS": ("max_rooms", self.generation),
        }
        for suffix, (attr, target) in overrides.items():
            value = env.get(ENV_PREFIX + suffix)
            if value is None or value == "":
                continue
            try:
                parsed = int(value)
            except ValueError:
                logger.warning("Ignoring non-integer %s%s=%r", ENV_PREFIX, suffix, value)
                continue
            setattr(target if target is not None else self, attr, parsed)
            logger.debug("Config override %s%s -> %s", ENV_PREFIX, suffix, parsed)
        self.generation.__post_init__()
        self.__post_init__()
        return self

    @classmethod
    def from_env(cls, base: Optional["GameConfig"] = None) -> "GameConfig":
        return (base or cls()).apply_env()
