from __future__ import annotations

import random
from typing import Iterable

from owaspcards.engine.deck import build_full_deck
from owaspcards.engine.state import CyberAsset, GameState, HandCard
from owaspcards.engine.types import AssetCard, CardCatalog, PlayableCard
from owaspcards.paths import get_paths
from owaspcards.services.content import ContentService


def load_catalog() -> CardCatalog:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_catalog()


class ScriptedRandom(random.Random):
    """random() returns scripted values first, then falls back to the seeded stream.

    Integer draws (shuffles, randrange) keep using the seeded stream.
    """

    def __init__(self, values: Iterable[float], seed: int = 0) -> None:
        super().__init__(seed)
        self.values = list(values)

    def random(self) -> float:
        if self.values:
            return self.values.pop(0)
        return super().random()

    def getrandbits(self, k: int) -> int:
        return super().getrandbits(k)


class NoRandom(random.Random):
    """Fails the test if a probability draw happens."""

    def random(self) -> float:
        raise AssertionError("unexpected random draw")

    def getrandbits(self, k: int) -> int:
        return super().getrandbits(k)


def cards_by_id(catalog: CardCatalog) -> dict[str, PlayableCard | AssetCard]:
    deck = build_full_deck(catalog)
    out: dict[str, PlayableCard | AssetCard] = {}
    for c in (*deck.ta_cards, *deck.dc_cards, *deck.ta_assets, *deck.dc_assets, *deck.jokers):
        out[c.id] = c
    return out


def hand(state: GameState, *card_ids: str) -> list[HandCard]:
    lookup = cards_by_id(state.catalog)
    return [state.hand_card(lookup[cid]) for cid in card_ids]  # type: ignore[arg-type]


def loose_hand(catalog: CardCatalog, *card_ids: str) -> list[HandCard]:
    lookup = cards_by_id(catalog)
    return [HandCard(instance_id=i, card=lookup[cid]) for i, cid in enumerate(card_ids, start=1000)]  # type: ignore[arg-type]


def asset(catalog: CardCatalog, instance_id: int, state: str = "facedown") -> CyberAsset:
    card = cards_by_id(catalog)["asset-hearts-jack"]
    damage = ("facedown", "revealed", "rotated", "destroyed").index(state)
    return CyberAsset(instance_id=instance_id, card=card, state=state, damage=damage)  # type: ignore[arg-type]


def type_totals(state: GameState) -> tuple[int, int]:
    ta = len(state.ta_deck)
    dc = len(state.dc_deck)
    for ps in (state.player, state.ai):
        ta += len(ps.ta_hand) + len(ps.ta_discard)
        dc += len(ps.dc_hand) + len(ps.dc_discard)
    return ta, dc
