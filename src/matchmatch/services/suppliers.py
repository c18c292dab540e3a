from __future__ import annotations

import logging
import random
from typing import Mapping

import requests

from matchmatch.engine.deck import DeckError, DeckResult, build_deck
from matchmatch.engine.types import Card, grid_error

from .content import CardCatalog

logger = logging.getLogger(__name__)

FLICKR_REST_URL = "https://api.flickr.com/services/rest/"
FLICKR_SEARCH_METHOD = "flickr.photos.search"
CARD_BACK_TAGS = "card deck"


class DeckSupplyError(RuntimeError):
    pass


class CatalogDeckSupplier:
    """Deals decks from the bundled card catalog."""

    def __init__(self, catalog: CardCatalog, rng: random.Random | None = None) -> None:
        self._catalog = catalog
        self._rng = rng or random.Random()

    def request_deck(self, rows: int, cols: int) -> DeckResult:
        err = grid_error(rows, cols)
        if err is not None:
            return DeckResult.failure(err)
        pairs = (rows * cols) // 2
        cards = self._catalog.all_cards()
        if len(cards) < pairs:
            return DeckResult.failure(f"Catalog has {len(cards)} cards, {pairs} needed.")
        picked = self._rng.sample(list(cards), pairs)
        return DeckResult(ok=True, deck=build_deck(picked, rows, cols, self._rng))


def _photo_to_card(photo: Mapping[str, object]) -> Card:
    pid = photo.get("id")
    url = photo.get("url_n")
    if not isinstance(pid, str) or not pid:
        raise DeckSupplyError("Photo without id")
    if not isinstance(url, str) or not url:
        raise DeckSupplyError(f"Photo {pid} has no image url")
    title = photo.get("title")
    return Card(id=pid, title=title if isinstance(title, str) else "", image_url=url)


class PhotoSearchDeckSupplier:
    """Deals decks of photos found by a Flickr-style REST photo search.

    With `prefetch_images` every picture is downloaded before the deck is
    reported ready; the bytes are kept in `images`, keyed by url.
    """

    def __init__(
        self,
        api_key: str,
        tags: str = "kitten",
        *,
        endpoint: str = FLICKR_REST_URL,
        http: requests.Session | None = None,
        timeout: float = 10.0,
        prefetch_images: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        self._api_key = api_key
        self._tags = tags
        self._endpoint = endpoint
        self._http = http or requests.Session()
        self._timeout = timeout
        self._prefetch = prefetch_images
        self._rng = rng or random.Random()
        self.images: dict[str, bytes] = {}

    def request_deck(self, rows: int, cols: int) -> DeckResult:
        err = grid_error(rows, cols)
        if err is not None:
            return DeckResult.failure(err)
        pairs = (rows * cols) // 2
        try:
            cards = self.search(pairs)
            if self._prefetch:
                self._download_images([c.image_url for c in cards])
            deck = build_deck(cards, rows, cols, self._rng)
        except (requests.RequestException, DeckSupplyError, DeckError) as e:
            logger.warning("photo deck request failed: %s", e)
            return DeckResult.failure(str(e))
        return DeckResult(ok=True, deck=deck)

    def card_back(self, tags: str = CARD_BACK_TAGS, candidates: int = 5) -> Card:
        """Pick a random photo for the shared face-down side of the cards."""
        if candidates < 1:
            raise ValueError("candidates must be positive")
        found = self.search(candidates, tags=tags, exact=False)
        if not found:
            raise DeckSupplyError(f"Photo search found no card back for {tags!r}")
        back = self._rng.choice(found)
        if self._prefetch:
            self._download_images([back.image_url])
        return back

    def search(self, count: int, tags: str | None = None, *, exact: bool = True) -> list[Card]:
        """Return `count` distinct photos; with `exact=False`, up to `count`."""
        params: dict[str, object] = {
            "method": FLICKR_SEARCH_METHOD,
            "api_key": self._api_key,
            "tags": self._tags if tags is None else tags,
            "per_page": count,
            "format": "json",
            "extras": "url_n",
            "nojsoncallback": 1,
        }
        response = self._http.get(self._endpoint, params=params, timeout=self._timeout)
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError as e:
            raise DeckSupplyError(f"Photo search returned invalid JSON: {e}") from e

        if not isinstance(payload, dict) or payload.get("stat", "ok") != "ok":
            message = payload.get("message") if isinstance(payload, dict) else None
            raise DeckSupplyError(f"Photo search failed: {message or 'unexpected response'}")
        photos = payload.get("photos")
        raw_list = photos.get("photo") if isinstance(photos, dict) else None
        if not isinstance(raw_list, list):
            raise DeckSupplyError("Photo search response has no photo list")

        cards: list[Card] = []
        seen: set[str] = set()
        for raw in raw_list:
            if not isinstance(raw, dict):
                continue
            card = _photo_to_card(raw)
            if card.id in seen:
                continue
            seen.add(card.id)
            cards.append(card)
            if len(cards) == count:
                break
        if exact and len(cards) < count:
            raise DeckSupplyError(f"Photo search found {len(cards)} photos, {count} needed")
        return cards

    def _download_images(self, urls: list[str]) -> None:
        for url in urls:
            if url in self.images:
                continue
            response = self._http.get(url, timeout=self._timeout)
            response.raise_for_status()
            self.images[url] = response.content
