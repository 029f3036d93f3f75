from __future__ import annotations

from .actions import (
    Action,
    AttackAction,
    CoinFlipAction,
    EndTurnAction,
    RebootAction,
    SelectAssetAction,
    SelectCardAction,
    SetDifficultyAction,
)
from .state import AttackState, CyberAsset, GameState, HandCard, LogEntry, PlayerState
from .types import Card, DefenseControlCard, JokerCard, ThreatAgentCard, card_display_name


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, SetDifficultyAction):
        return {"type": "set_difficulty", "difficulty": a.difficulty}
    if isinstance(a, CoinFlipAction):
        return {"type": "coin_flip", "result": a.result}
    if isinstance(a, SelectCardAction):
        return {"type": "select_card", "instance_id": a.instance_id}
    if isinstance(a, SelectAssetAction):
        return {"type": "select_asset", "instance_id": a.instance_id}
    if isinstance(a, AttackAction):
        return {"type": "attack"}
    if isinstance(a, EndTurnAction):
        return {"type": "end_turn"}
    if isinstance(a, RebootAction):
        return {"type": "reboot"}
    # should be unreachable
    return {"type": "unknown"}


def card_to_dict(card: Card) -> dict[str, object]:
    out: dict[str, object] = {
        "id": card.id,
        "category": card.category,
        "name": card_display_name(card),
    }
    if isinstance(card, ThreatAgentCard):
        out.update(suit=card.suit, value=card.value, risk={"id": card.risk.id, "name": card.risk.name})
    elif isinstance(card, DefenseControlCard):
        out.update(
            suit=card.suit,
            value=card.value,
            control={"id": card.control.id, "name": card.control.name},
        )
    elif isinstance(card, JokerCard):
        out.update(color=card.color)
    else:
        out.update(suit=card.suit, face=card.face)
    return out


def _hand_card_to_dict(hc: HandCard) -> dict[str, object]:
    return {"instance_id": hc.instance_id, "card": card_to_dict(hc.card)}


def _asset_to_dict(a: CyberAsset) -> dict[str, object]:
    return {
        "instance_id": a.instance_id,
        "card": card_to_dict(a.card),
        "state": a.state,
        "damage": a.damage,
    }


def _player_to_dict(p: PlayerState) -> dict[str, object]:
    return {
        "assets": [_asset_to_dict(a) for a in p.assets],
        "ta_hand": [_hand_card_to_dict(hc) for hc in p.ta_hand],
        "dc_hand": [_hand_card_to_dict(hc) for hc in p.dc_hand],
        "ta_discard": [c.id for c in p.ta_discard],
        "dc_discard": [c.id for c in p.dc_discard],
        "successful_defenses": p.successful_defenses,
    }


def _attack_to_dict(a: AttackState | None) -> dict[str, object] | None:
    if a is None:
        return None
    return {
        "target": a.target,
        "card": _hand_card_to_dict(a.card),
        "stage": a.stage,
        "attacks_this_turn": a.attacks_this_turn,
    }


def _log_to_dict(e: LogEntry | None) -> dict[str, object] | None:
    if e is None:
        return None
    return {"actor": e.actor, "action": e.action, "details": e.details}


def snapshot(state: GameState) -> dict[str, object]:
    """Return a JSON-serializable, read-only view of the current game state."""
    return {
        "seed": state.seed,
        "phase": state.phase,
        "current_attacker": state.current_attacker,
        "difficulty": state.difficulty,
        "turn_number": state.turn_number,
        "coin_flip_result": state.coin_flip_result,
        "player": _player_to_dict(state.player),
        "ai": _player_to_dict(state.ai),
        "ta_deck": [c.id for c in state.ta_deck],
        "dc_deck": [c.id for c in state.dc_deck],
        "attack": _attack_to_dict(state.attack),
        "attacks_this_turn": state.attacks_this_turn,
        "cards_drawn": state.cards_drawn,
        "selected_card": state.selected_card,
        "selected_asset": state.selected_asset,
        "message": state.message,
        "last_action": _log_to_dict(state.last_action),
        "action_log": [_log_to_dict(e) for e in state.action_log],
        "history": [action_to_dict(a) for a in state.history],
    }
