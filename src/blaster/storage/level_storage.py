from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import List

from esper import World

from blaster.constants import LEVEL_FILE_SUFFIX, MAX_LEVEL_NAME_LENGTH
from blaster.errors import InvalidValueError, LevelNotFoundError
from blaster.events.bus import EVENT_LEVEL_SAVED, EventBus
from blaster.storage.codec import LevelState, decode_level, encode_level, level_state_from_world

logger = logging.getLogger(__name__)


class LevelStorage:
    """Saves and loads level documents as JSON files in one directory."""

    def __init__(self, directory: Path | str, event_bus: EventBus | None = None):
        self.directory = Path(directory)
        self.event_bus = event_bus

    def path_for(self, name: str) -> Path:
        if not name or len(name) > MAX_LEVEL_NAME_LENGTH:
            raise InvalidValueError(
                f"Level name must be 1-{MAX_LEVEL_NAME_LENGTH} characters",
                field="name",
            )
        if Path(name).name != name or name.startswith("."):
            raise InvalidValueError(f"Invalid level name {name!r}", field="name")
        return self.directory / f"{name}{LEVEL_FILE_SUFFIX}"

    def save(self, name: str, level: World | LevelState) -> Path:
        state = level if isinstance(level, LevelState) else level_state_from_world(level)
        path = self.path_for(name)
        self.directory.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(encode_level(state), handle, indent=2)
        logger.debug("Saved level %r to %s", name, path)
        if self.event_bus is not None:
            self.event_bus.emit(EVENT_LEVEL_SAVED, level=name, path=path)
        return path

    def load(self, name: str) -> LevelState:
        path = self.path_for(name)
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError as exc:
            raise LevelNotFoundError(f"{name} does not exist.") from exc
        except json.JSONDecodeError as exc:
            raise InvalidValueError(f"{name} is not valid JSON: {exc.msg}") from exc
        except UnicodeDecodeError as exc:
            raise InvalidValueError(f"{name} is not UTF-8 text") from exc
        logger.debug("Loaded level %r from %s", name, path)
        return decode_level(payload)

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def names(self) -> List[str]:
        if not self.directory.is_dir():
            return []
        return sorted(
            path.stem
            for path in self.directory.iterdir()
            if path.is_file() and path.suffix == LEVEL_FILE_SUFFIX
        )

    def remove(self, name: str) -> bool:
        path = self.path_for(name)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    def install_presets(self, source: Path | str) -> List[str]:
        """Copy bundled level files that are not already present; return their names."""
        source_dir = Path(source)
        if not source_dir.is_dir():
            return []
        self.directory.mkdir(parents=True, exist_ok=True)
        installed: List[str] = []
        for preset in sorted(source_dir.glob(f"*{LEVEL_FILE_SUFFIX}")):
            target = self.directory / preset.name
            if target.exists():
                continue
            shutil.copyfile(preset, target)
            installed.append(preset.stem)
        return installed
