from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

TASuit = Literal["hearts", "diamonds"]
DCSuit = Literal["spades", "clubs"]
Suit = Literal["hearts", "diamonds", "spades", "clubs"]
FaceType = Literal["jack", "queen", "king"]
JokerColor = Literal["black", "red"]

CardCategory = Literal["threat_agent", "defense_control", "asset", "joker"]

Side = Literal["player", "ai"]
Difficulty = Literal["easy", "hard", "brutal"]
AssetState = Literal["facedown", "revealed", "rotated", "destroyed"]
AttackStage = Literal["observation", "assessment", "pwn"]
Phase = Literal[
    "difficulty_select",
    "coin_flip",
    "attack_phase",
    "defense_phase",
    "player_won",
    "ai_won",
]

TA_SUITS: tuple[TASuit, ...] = ("hearts", "diamonds")
DC_SUITS: tuple[DCSuit, ...] = ("spades", "clubs")
FACE_TYPES: tuple[FaceType, ...] = ("jack", "queen", "king")
CARD_VALUES: tuple[int, ...] = tuple(range(1, 11))

SUIT_SYMBOLS: dict[str, str] = {
    "hearts": "♥",
    "diamonds": "♦",
    "spades": "♠",
    "clubs": "♣",
}


@dataclass(frozen=True)
class OwaspRisk:
    id: str
    name: str
    description: str


@dataclass(frozen=True)
class OwaspControl:
    id: str
    name: str
    description: str


@dataclass(frozen=True)
class ThreatAgentCard:
    id: str
    category: Literal["threat_agent"]
    suit: TASuit
    value: int
    risk: OwaspRisk


@dataclass(frozen=True)
class DefenseControlCard:
    id: str
    category: Literal["defense_control"]
    suit: DCSuit
    value: int
    control: OwaspControl


@dataclass(frozen=True)
class AssetCard:
    id: str
    category: Literal["asset"]
    suit: Suit
    face: FaceType
    asset_name: str


@dataclass(frozen=True)
class JokerCard:
    id: str
    category: Literal["joker"]
    color: JokerColor


Card = ThreatAgentCard | DefenseControlCard | AssetCard | JokerCard
PlayableCard = ThreatAgentCard | DefenseControlCard | JokerCard


@dataclass(frozen=True)
class CardCatalog:
    """Immutable OWASP metadata used to build a deck.

    Card values 1-10 map to the OWASP Top 10 (2021) on the attack side and to
    the OWASP Proactive Controls on the defense side. Face cards name the
    cyber assets.
    """

    risks: dict[int, OwaspRisk]
    controls: dict[int, OwaspControl]
    asset_names: dict[FaceType, str]

    def risk(self, value: int) -> OwaspRisk:
        return self.risks[value]

    def control(self, value: int) -> OwaspControl:
        return self.controls[value]

    def asset_name(self, face: FaceType) -> str:
        return self.asset_names[face]


def card_value(card: Card) -> int:
    """Numeric value of a card; jokers and assets have none and count as 0."""
    if isinstance(card, (ThreatAgentCard, DefenseControlCard)):
        return card.value
    return 0


def card_display_name(card: Card) -> str:
    if isinstance(card, JokerCard):
        return "Black Joker" if card.color == "black" else "Red Joker"
    if isinstance(card, (ThreatAgentCard, DefenseControlCard)):
        return f"{card.value} of {card.suit.capitalize()}"
    if isinstance(card, AssetCard):
        return card.asset_name
    return "Unknown Card"


def card_title(card: Card) -> str:
    """Short label with the OWASP name, as shown on a card face."""
    if isinstance(card, ThreatAgentCard):
        return f"{card.value}{SUIT_SYMBOLS[card.suit]} {card.risk.name}"
    if isinstance(card, DefenseControlCard):
        return f"{card.value}{SUIT_SYMBOLS[card.suit]} {card.control.name}"
    if isinstance(card, JokerCard):
        return f"{card_display_name(card)} (wildcard)"
    return f"{card.face.upper()[0]}{SUIT_SYMBOLS[card.suit]} {card.asset_name}"
