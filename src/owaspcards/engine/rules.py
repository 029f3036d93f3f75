from __future__ import annotations

from .state import CyberAsset
from .types import (
    AssetState,
    AttackStage,
    Card,
    DefenseControlCard,
    JokerCard,
    ThreatAgentCard,
)

ASSET_STATES: tuple[AssetState, ...] = ("facedown", "revealed", "rotated", "destroyed")

ASSET_STATE_LABELS: dict[AssetState, str] = {
    "facedown": "Protected",
    "revealed": "Observed",
    "rotated": "Assessed",
    "destroyed": "PWN'd",
}

# Outcome wording used when an attack lands and moves an asset to this state.
HIT_LABELS: dict[AssetState, str] = {
    "revealed": "OBSERVED",
    "rotated": "ASSESSED",
    "destroyed": "PWN'd!",
}

_STAGES: dict[AssetState, AttackStage] = {
    "facedown": "observation",
    "revealed": "assessment",
    "rotated": "pwn",
}


def can_defend(attack: Card, defense: Card) -> bool:
    """True if `defense` neutralizes `attack`.

    Jokers are wildcards on either side. Otherwise only a Defense Control of
    the same value blocks a Threat Agent.
    """
    if isinstance(defense, JokerCard) or isinstance(attack, JokerCard):
        return True
    if not isinstance(defense, DefenseControlCard):
        return False
    if not isinstance(attack, ThreatAgentCard):
        return False
    return defense.value == attack.value


def state_index(state: AssetState) -> int:
    return ASSET_STATES.index(state)


def next_asset_state(state: AssetState) -> AssetState:
    if state == "destroyed":
        return state
    return ASSET_STATES[state_index(state) + 1]


def stage_for(state: AssetState) -> AttackStage:
    """Attack stage implied by the target's current state."""
    if state == "destroyed":
        raise ValueError("A destroyed asset cannot be attacked.")
    return _STAGES[state]


def advance_asset(asset: CyberAsset) -> AssetState:
    """Apply one unblocked hit: one lifecycle step, one point of damage."""
    if asset.state == "destroyed":
        raise ValueError(f"Asset {asset.instance_id} is already destroyed.")
    asset.state = next_asset_state(asset.state)
    asset.damage += 1
    return asset.state
