from __future__ import annotations

import json
import logging
import os
import tempfile
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional

from jsonschema import Draft7Validator
from platformdirs import PlatformDirs

from .config import GameConfig
from .exceptions import CorruptSaveError, NoSavedGameError
from .rng import RandomSource
from .world import GameContext

logger = logging.getLogger(__name__)

APP_NAME = "Tombs"
SAVE_FILENAME = "savegame.json"
ENV_SAVE_DIR = "TOMBS_SAVE_DIR"


@lru_cache(maxsize=1)
def savegame_validator() -> Draft7Validator:
    schema_file = resources.files("tombs.data").joinpath("schemas/savegame.schema.json")
    with schema_file.open("rb") as fh:
        schema = json.load(fh)
    return Draft7Validator(schema)


def default_save_dir() -> Path:
    """Platform user data dir, unless TOMBS_SAVE_DIR points elsewhere."""
    override = os.getenv(ENV_SAVE_DIR)
    if override:
        return Path(override).expanduser()
    return Path(PlatformDirs(appname=APP_NAME, appauthor=False).user_data_dir)


def atomic_write_json(path: Path, obj: Dict[str, Any]) -> None:
    """Write JSON via a temp file and os.replace so a crash never leaves half a save."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = json.dumps(obj, separators=(",", ":")).encode("utf-8")
    fd, tmp_name = tempfile.mkstemp(prefix=path.name, dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)


class SaveManager:
    """Single-slot save file for the current game."""

    def __init__(self, save_dir: Optional[Path] = None) -> None:
        self.save_dir = Path(save_dir) if save_dir is not None else default_save_dir()

    @property
    def path(self) -> Path:
        return self.save_dir / SAVE_FILENAME

    def has_save(self) -> bool:
        return self.path.is_file()

    def save(self, ctx: GameContext) -> Path:
        atomic_write_json(self.path, ctx.to_dict())
        logger.info("Saved game to %s (dungeon level %d)", self.path, ctx.dungeon_level)
        return self.path

    def load(self, config: Optional[GameConfig] = None, rng: Optional[RandomSource] = None) -> GameContext:
        """Read, validate and rebuild the saved game.

        Raises NoSavedGameError when there is no file and CorruptSaveError when
        it cannot be decoded, fails schema validation or cannot be rebuilt.
        """
        path = self.path
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise NoSavedGameError(f"No saved game at {path}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Save file %s could not be read: %s", path, exc)
            raise CorruptSaveError(f"Save file could not be read: {exc}") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error("Save file %s is not valid JSON: %s", path, exc)
            raise CorruptSaveError(f"Save file is not valid JSON: {exc}") from exc

        errors = sorted(savegame_validator().iter_errors(data), key=lambda e: [str(p) for p in e.path])
        if errors:
            first = errors[0]
            where = "/".join(str(p) for p in first.path) or "<root>"
            logger.error("Save file %s failed validation at %s: %s", path, where, first.message)
            raise CorruptSaveError(f"Invalid save at {where}: {first.message}")

        try:
            ctx = GameContext.from_dict(data, config=config, rng=rng)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise CorruptSaveError(f"Save file could not be restored: {exc}") from exc
        logger.info("Loaded game from %s (dungeon level %d)", path, ctx.dungeon_level)
        return ctx

    def delete(self) -> bool:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        logger.info("Deleted save %s", self.path)
        return True
