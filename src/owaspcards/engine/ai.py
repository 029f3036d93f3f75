from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Literal, Sequence

from .rules import can_defend, state_index
from .state import CyberAsset, HandCard
from .types import (
    DefenseControlCard,
    Difficulty,
    JokerCard,
    PlayableCard,
    ThreatAgentCard,
    card_value,
)

DecisionKind = Literal["attack", "defend", "draw_end"]


@dataclass(frozen=True)
class AISpec:
    """AI tuning for one difficulty tier.

    defend_chance:   probability of blocking when a valid defense is in hand
    continue_chance: probability of attacking again after a hit
    random_attack_card: pick attack cards at random instead of by analysis
    """

    difficulty: Difficulty = "hard"
    defend_chance: float = 0.5
    continue_chance: float = 0.7
    random_attack_card: bool = False


AI_SPECS: dict[Difficulty, AISpec] = {
    "easy": AISpec(difficulty="easy", defend_chance=0.15, continue_chance=0.3, random_attack_card=True),
    "hard": AISpec(difficulty="hard", defend_chance=0.5, continue_chance=0.7),
    "brutal": AISpec(difficulty="brutal", defend_chance=0.95, continue_chance=0.95),
}


def spec_for(difficulty: Difficulty | None) -> AISpec:
    if difficulty is None:
        return AI_SPECS["hard"]
    return AI_SPECS[difficulty]


@dataclass(frozen=True)
class AIDecision:
    action: DecisionKind
    reasoning: str
    card: HandCard | None = None


def _card_label(card: PlayableCard) -> str:
    if isinstance(card, ThreatAgentCard):
        return card.risk.name
    if isinstance(card, DefenseControlCard):
        return card.control.name
    return "card"


def choose_target(assets: Sequence[CyberAsset]) -> CyberAsset | None:
    """Most progressed asset first (rotated > revealed > facedown), then most damaged."""
    valid = [a for a in assets if a.state != "destroyed"]
    if not valid:
        return None
    # max() keeps the first of equal keys, so ties fall back to board order.
    return max(valid, key=lambda a: (state_index(a.state), a.damage))


def choose_attack_card(
    ta_hand: Sequence[HandCard],
    defender_dc_hand: Sequence[HandCard],
    spec: AISpec,
    rng: random.Random,
) -> AIDecision:
    if not ta_hand:
        return AIDecision(action="draw_end", reasoning="No attack cards available, ending turn")

    ta_cards = [hc for hc in ta_hand if isinstance(hc.card, ThreatAgentCard)]
    jokers = [hc for hc in ta_hand if isinstance(hc.card, JokerCard)]
    # A joker attack is blocked by any defense card, so it is only used when nothing else is left.
    usable = ta_cards if ta_cards else jokers
    if not usable:
        return AIDecision(action="draw_end", reasoning="No attack cards available, ending turn")

    if spec.random_attack_card:
        chosen = usable[rng.randrange(len(usable))]
        return AIDecision(action="attack", card=chosen, reasoning=f"Attacking with {_card_label(chosen.card)}")

    def by_value(hc: HandCard) -> int:
        return card_value(hc.card)

    defender_cards = [hc.card for hc in defender_dc_hand]
    defender_has_joker = any(isinstance(c, JokerCard) for c in defender_cards)

    undefendable = [hc for hc in usable if not any(can_defend(hc.card, d) for d in defender_cards)]
    if undefendable:
        best = max(undefendable, key=by_value)
        reasoning = (
            "Attacking with a value that avoids all non-joker defenses"
            if defender_has_joker
            else "Attacking with an undefendable value"
        )
        return AIDecision(action="attack", card=best, reasoning=reasoning)

    dc_values = {c.value for c in defender_cards if isinstance(c, DefenseControlCard)}
    forces_joker = [
        hc for hc in usable if isinstance(hc.card, ThreatAgentCard) and hc.card.value not in dc_values
    ]
    if forces_joker:
        best = max(forces_joker, key=by_value)
        return AIDecision(
            action="attack",
            card=best,
            reasoning="Forcing Joker defense (no matching Defense Control value)",
        )

    fallback = max(usable, key=by_value)
    return AIDecision(action="attack", card=fallback, reasoning=f"Attacking with {_card_label(fallback.card)}")


def choose_defense(
    dc_hand: Sequence[HandCard],
    attack_card: PlayableCard,
    spec: AISpec,
    rng: random.Random,
) -> AIDecision:
    """Returns a `defend` decision; `card` is None when the AI lets the attack through."""
    if not dc_hand:
        return AIDecision(action="defend", reasoning="No defense cards available")

    valid = [hc for hc in dc_hand if can_defend(attack_card, hc.card)]
    if not valid:
        return AIDecision(action="defend", reasoning="No matching defense card available")

    if rng.random() >= spec.defend_chance:
        return AIDecision(action="defend", reasoning="Choosing not to defend")

    for hc in valid:
        if not isinstance(hc.card, JokerCard):
            return AIDecision(action="defend", card=hc, reasoning=f"Defending with {_card_label(hc.card)}")

    # Only jokers match at this point.
    return AIDecision(action="defend", card=valid[0], reasoning="Using Joker to defend")


def decide_continue(
    ta_hand: Sequence[HandCard],
    targets: Sequence[CyberAsset],
    spec: AISpec,
    rng: random.Random,
) -> AIDecision:
    valid = [a for a in targets if a.state != "destroyed"]
    if not valid:
        return AIDecision(action="draw_end", reasoning="No valid targets remaining")
    if not ta_hand:
        return AIDecision(action="draw_end", reasoning="No attack cards remaining")

    if any(a.state == "rotated" for a in valid):
        return AIDecision(action="attack", reasoning="Continuing attack to destroy rotated asset")

    if len(ta_hand) < 3:
        return AIDecision(action="draw_end", reasoning="Ending turn to replenish hand")

    if rng.random() < spec.continue_chance:
        return AIDecision(action="attack", reasoning="Continuing attack to pressure opponent")
    return AIDecision(action="draw_end", reasoning="Ending turn strategically")


def decide_reboot(
    dc_hand: Sequence[HandCard],
    dc_discard: Sequence[PlayableCard],
    assets: Sequence[CyberAsset],
) -> bool:
    """Reboot when the defense hand is nearly empty and the discard is worth recovering."""
    active = [a for a in assets if a.state != "destroyed"]
    # Never trade away the last standing asset.
    if len(active) <= 1:
        return False
    return len(dc_hand) <= 1 and len(dc_discard) >= 3
