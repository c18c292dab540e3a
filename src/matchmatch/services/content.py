from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

from jsonschema import Draft202012Validator

from matchmatch.engine.types import Card


class ContentError(RuntimeError):
    pass


def load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def schema_errors(instance: object, schema: object) -> list[str]:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    out: list[str] = []
    for err in errors[:10]:
        loc = "/".join(str(p) for p in err.absolute_path)
        out.append(f"- {loc}: {err.message}")
    return out


def validate_json(instance: object, schema: object, *, context: str) -> None:
    errors = schema_errors(instance, schema)
    if errors:
        raise ContentError("\n".join([f"Schema validation failed for {context}:", *errors]))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


@dataclass(frozen=True)
class CardCatalog:
    """Immutable set of cards a deck can be dealt from."""

    cards: dict[str, Card]

    def get(self, card_id: str) -> Card:
        return self.cards[card_id]

    def all_cards(self) -> Sequence[Card]:
        return list(self.cards.values())

    def __len__(self) -> int:
        return len(self.cards)


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_schema(self, name: str) -> object:
        return load_json(self._schema_dir / name)

    def load_catalog(self) -> CardCatalog:
        path = self._data_dir / "cards.json"
        raw = load_json(path)
        validate_json(raw, self.load_schema("cards.schema.json"), context=str(path))

        if not isinstance(raw, dict):
            raise ContentError("cards.json must be an object")
        raw_cards = raw.get("cards")
        if not isinstance(raw_cards, list):
            raise ContentError("cards.json.cards must be a list")

        cards: dict[str, Card] = {}
        for item in raw_cards:
            if not isinstance(item, dict):
                continue
            card = Card(
                id=_require_str(item, "id"),
                title=_require_str(item, "title"),
                image_url=_require_str(item, "image_url"),
            )
            if card.id in cards:
                raise ContentError(f"Duplicate card id in {path}: {card.id}")
            cards[card.id] = card
        return CardCatalog(cards=cards)

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_catalog()
        _ = self.load_schema("settings.schema.json")
