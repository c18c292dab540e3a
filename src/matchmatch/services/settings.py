from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from matchmatch.engine.session import CommandResult, GameSession
from matchmatch.engine.types import PlayType
from matchmatch.paths import Paths

from .content import ContentError, load_json, schema_errors
from .suppliers import PhotoSearchDeckSupplier

SETTINGS_VERSION = 1


class SettingsError(RuntimeError):
    pass


@dataclass
class GameSettings:
    rows: int = 4
    cols: int = 4
    play_type: PlayType = "multi"
    photo_tags: str = "kitten"

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "GameSettings":
        play_type = d.get("play_type", "multi")
        return GameSettings(
            rows=int(d.get("rows", 4)),  # type: ignore[call-overload]
            cols=int(d.get("cols", 4)),  # type: ignore[call-overload]
            play_type="single" if play_type == "single" else "multi",
            photo_tags=str(d.get("photo_tags", "kitten")),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "version": SETTINGS_VERSION,
            "rows": self.rows,
            "cols": self.cols,
            "play_type": self.play_type,
            "photo_tags": self.photo_tags,
        }


class SettingsService:
    """Loads and saves the player's game settings as JSON."""

    def __init__(self, settings_path: Path, schema_path: Path) -> None:
        self._path = settings_path
        self._schema_path = schema_path
        self.settings = self._load_or_create()

    @staticmethod
    def from_paths(paths: Paths) -> "SettingsService":
        return SettingsService(paths.settings_path, paths.schema_dir / "settings.schema.json")

    def _validate(self, raw: object) -> None:
        try:
            schema = load_json(self._schema_path)
        except ContentError as e:
            raise SettingsError(str(e)) from e
        errors = schema_errors(raw, schema)
        if errors:
            raise SettingsError("\n".join([f"Invalid settings in {self._path}:", *errors]))

    def _load_or_create(self) -> GameSettings:
        if not self._path.exists():
            settings = GameSettings()
            self._write(settings)
            return settings
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise SettingsError(f"Invalid JSON in {self._path}: {e}") from e
        self._validate(raw)
        return GameSettings.from_dict(raw)

    def _write(self, settings: GameSettings) -> None:
        data = settings.to_dict()
        self._validate(data)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def save(self) -> None:
        self._write(self.settings)

    def update(self, *, rows: int | None = None, cols: int | None = None,
               play_type: PlayType | None = None, photo_tags: str | None = None) -> None:
        s = self.settings
        updated = GameSettings(
            rows=s.rows if rows is None else rows,
            cols=s.cols if cols is None else cols,
            play_type=s.play_type if play_type is None else play_type,
            photo_tags=s.photo_tags if photo_tags is None else photo_tags,
        )
        self._write(updated)
        self.settings = updated

    def apply(self, session: GameSession) -> CommandResult:
        s = self.settings
        return session.configure(s.rows, s.cols, s.play_type)

    def photo_supplier(self, api_key: str, **kwargs: Any) -> PhotoSearchDeckSupplier:
        """Photo-search supplier using the saved search tags."""
        return PhotoSearchDeckSupplier(api_key, self.settings.photo_tags, **kwargs)
