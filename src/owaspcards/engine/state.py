from __future__ import annotations

import random
from dataclasses import dataclass, field

from .actions import Action
from .types import (
    AssetCard,
    AssetState,
    AttackStage,
    CardCatalog,
    Difficulty,
    Phase,
    PlayableCard,
    Side,
)

DIFFICULTIES: tuple[Difficulty, ...] = ("easy", "hard", "brutal")
TERMINAL_PHASES: frozenset[str] = frozenset({"player_won", "ai_won"})


@dataclass(frozen=True)
class GameConfig:
    """Rule constants for one game.

    Discard piles only grow during a game, except that a reboot (allowed only
    with `allow_reboot`) moves a side's whole defense discard back to its hand.
    """

    hand_size: int = 5
    assets_per_player: int = 3
    assets_to_win: int = 2
    defenses_to_win: int = 6
    redraw_bonus: int = 2
    log_limit: int = 200
    allow_reboot: bool = False


@dataclass(frozen=True)
class HandCard:
    instance_id: int
    card: PlayableCard


@dataclass
class CyberAsset:
    instance_id: int
    card: AssetCard
    state: AssetState = "facedown"
    damage: int = 0

    @property
    def name(self) -> str:
        return self.card.asset_name

    @property
    def destroyed(self) -> bool:
        return self.state == "destroyed"


@dataclass
class PlayerState:
    assets: list[CyberAsset]
    ta_hand: list[HandCard]
    dc_hand: list[HandCard]
    ta_discard: list[PlayableCard] = field(default_factory=list)
    dc_discard: list[PlayableCard] = field(default_factory=list)
    successful_defenses: int = 0

    def active_assets(self) -> list[CyberAsset]:
        return [a for a in self.assets if a.state != "destroyed"]

    def destroyed_count(self) -> int:
        return sum(1 for a in self.assets if a.state == "destroyed")

    def find_asset(self, instance_id: int) -> CyberAsset | None:
        for a in self.assets:
            if a.instance_id == instance_id:
                return a
        return None


@dataclass(frozen=True)
class AttackState:
    target: int  # asset instance id
    card: HandCard
    stage: AttackStage
    attacks_this_turn: int


@dataclass(frozen=True)
class LogEntry:
    actor: Side
    action: str
    details: str


@dataclass
class GameState:
    catalog: CardCatalog
    config: GameConfig
    seed: int | None
    rng: random.Random
    player: PlayerState
    ai: PlayerState
    ta_deck: list[PlayableCard]
    dc_deck: list[PlayableCard]
    phase: Phase = "difficulty_select"
    current_attacker: Side = "player"
    difficulty: Difficulty | None = None
    attack: AttackState | None = None
    attacks_this_turn: int = 0
    turn_number: int = 1
    cards_drawn: int = 0
    coin_flip_result: Side | None = None
    action_log: list[LogEntry] = field(default_factory=list)
    last_action: LogEntry | None = None
    log_total: int = 0
    selected_card: int | None = None
    selected_asset: int | None = None
    message: str = ""
    history: list[Action] = field(default_factory=list)
    next_instance_id: int = 1

    def side(self, who: Side) -> PlayerState:
        return self.player if who == "player" else self.ai

    @staticmethod
    def opponent(who: Side) -> Side:
        return "ai" if who == "player" else "player"

    @property
    def finished(self) -> bool:
        return self.phase in TERMINAL_PHASES

    def issue_id(self) -> int:
        iid = self.next_instance_id
        self.next_instance_id += 1
        return iid

    def hand_card(self, card: PlayableCard) -> HandCard:
        return HandCard(instance_id=self.issue_id(), card=card)

    def add_log(self, actor: Side, action: str, details: str) -> LogEntry:
        entry = LogEntry(actor=actor, action=action, details=details)
        self.action_log.append(entry)
        self.log_total += 1
        overflow = len(self.action_log) - self.config.log_limit
        if overflow > 0:
            del self.action_log[:overflow]
        self.last_action = entry
        return entry
