from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TypeVar

from .types import (
    CARD_VALUES,
    DC_SUITS,
    FACE_TYPES,
    TA_SUITS,
    AssetCard,
    CardCatalog,
    DCSuit,
    DefenseControlCard,
    FaceType,
    JokerCard,
    JokerColor,
    PlayableCard,
    Suit,
    TASuit,
    ThreatAgentCard,
)

T = TypeVar("T")


@dataclass(frozen=True)
class FullDeck:
    ta_cards: tuple[ThreatAgentCard, ...]
    dc_cards: tuple[DefenseControlCard, ...]
    ta_assets: tuple[AssetCard, ...]
    dc_assets: tuple[AssetCard, ...]
    jokers: tuple[JokerCard, ...]

    def attack_pile(self) -> list[PlayableCard]:
        """Threat agents plus the black joker, unshuffled."""
        return [*self.ta_cards, self.jokers[0]]

    def defense_pile(self) -> list[PlayableCard]:
        """Defense controls plus the red joker, unshuffled."""
        return [*self.dc_cards, self.jokers[1]]


def _threat_agent(catalog: CardCatalog, suit: TASuit, value: int) -> ThreatAgentCard:
    return ThreatAgentCard(
        id=f"ta-{suit}-{value}",
        category="threat_agent",
        suit=suit,
        value=value,
        risk=catalog.risk(value),
    )


def _defense_control(catalog: CardCatalog, suit: DCSuit, value: int) -> DefenseControlCard:
    return DefenseControlCard(
        id=f"dc-{suit}-{value}",
        category="defense_control",
        suit=suit,
        value=value,
        control=catalog.control(value),
    )


def _asset(catalog: CardCatalog, suit: Suit, face: FaceType) -> AssetCard:
    return AssetCard(
        id=f"asset-{suit}-{face}",
        category="asset",
        suit=suit,
        face=face,
        asset_name=catalog.asset_name(face),
    )


def _joker(color: JokerColor) -> JokerCard:
    return JokerCard(id=f"joker-{color}", category="joker", color=color)


def build_full_deck(catalog: CardCatalog) -> FullDeck:
    ta_cards: list[ThreatAgentCard] = []
    dc_cards: list[DefenseControlCard] = []
    ta_assets: list[AssetCard] = []
    dc_assets: list[AssetCard] = []

    for suit in TA_SUITS:
        for value in CARD_VALUES:
            ta_cards.append(_threat_agent(catalog, suit, value))
        for face in FACE_TYPES:
            ta_assets.append(_asset(catalog, suit, face))

    for suit in DC_SUITS:
        for value in CARD_VALUES:
            dc_cards.append(_defense_control(catalog, suit, value))
        for face in FACE_TYPES:
            dc_assets.append(_asset(catalog, suit, face))

    return FullDeck(
        ta_cards=tuple(ta_cards),
        dc_cards=tuple(dc_cards),
        ta_assets=tuple(ta_assets),
        dc_assets=tuple(dc_assets),
        jokers=(_joker("black"), _joker("red")),
    )


def shuffle(rng: random.Random, items: list[T]) -> None:
    rng.shuffle(items)
