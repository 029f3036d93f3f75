from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable

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
from .ai import choose_attack_card, choose_defense, choose_target, decide_continue, decide_reboot, spec_for
from .deck import build_full_deck, shuffle
from .narration import attack_details, defense_details, defense_name
from .pacing import Pacer
from .rules import HIT_LABELS, advance_asset, can_defend, stage_for, state_index
from .state import (
    DIFFICULTIES,
    AttackState,
    CyberAsset,
    GameConfig,
    GameState,
    HandCard,
    LogEntry,
    PlayerState,
)
from .types import AssetCard, CardCatalog, Phase, PlayableCard, Side


@dataclass
class StepResult:
    ok: bool
    events: list[LogEntry] = field(default_factory=list)
    error: str | None = None


@dataclass(frozen=True)
class WinResult:
    phase: Phase
    winner: Side
    reason: str


def _reject(msg: str) -> StepResult:
    return StepResult(ok=False, events=[], error=msg)


def _draw_to_size(state: GameState, hand: list[HandCard], pile: list[PlayableCard], target: int) -> int:
    """Draw from the front of `pile` until `hand` reaches `target`; an empty pile just stops."""
    drawn = 0
    while len(hand) < target and pile:
        hand.append(state.hand_card(pile.pop(0)))
        drawn += 1
    state.cards_drawn += drawn
    return drawn


def _remove_from_hand(hand: list[HandCard], instance_id: int) -> HandCard | None:
    for i, hc in enumerate(hand):
        if hc.instance_id == instance_id:
            return hand.pop(i)
    return None


def _discard(hand: list[HandCard], discard: list[PlayableCard], card: HandCard) -> None:
    removed = _remove_from_hand(hand, card.instance_id)
    if removed is not None:
        discard.append(removed.card)


def find_hand_card(hand: Iterable[HandCard], instance_id: int | None) -> HandCard | None:
    if instance_id is None:
        return None
    for hc in hand:
        if hc.instance_id == instance_id:
            return hc
    return None


def attackable_assets(state: GameState, attacker: Side) -> list[CyberAsset]:
    """Assets the attacker may target: the opponent's assets that are not destroyed."""
    return state.side(state.opponent(attacker)).active_assets()


def evaluate_winner(state: GameState) -> WinResult | None:
    """Win conditions in fixed priority order; the first satisfied one decides."""
    cfg = state.config
    player_lost = state.player.destroyed_count()
    ai_lost = state.ai.destroyed_count()
    total = cfg.assets_per_player

    if player_lost >= cfg.assets_to_win:
        return WinResult("ai_won", "ai", f"AI breached {player_lost} of your {total} assets")
    if ai_lost >= cfg.assets_to_win:
        return WinResult("player_won", "player", f"You breached {ai_lost} of {total} AI assets")
    if state.player.successful_defenses >= cfg.defenses_to_win:
        return WinResult(
            "player_won", "player", f"You successfully defended {cfg.defenses_to_win} attacks"
        )
    if state.ai.successful_defenses >= cfg.defenses_to_win:
        return WinResult(
            "ai_won", "ai", f"AI successfully defended {cfg.defenses_to_win} of your attacks"
        )
    return None


def _check_winner(state: GameState) -> bool:
    win = evaluate_winner(state)
    if win is None:
        return False
    state.phase = win.phase
    state.message = f"You Win! {win.reason}" if win.winner == "player" else f"Game Over! {win.reason}"
    state.add_log(win.winner, "Game End", win.reason)
    return True


def _resolve_attack(
    state: GameState,
    attacker: Side,
    card: HandCard,
    target: CyberAsset,
    pacer: Pacer,
    reasoning: str | None = None,
) -> bool:
    """Run one attack through defense and resolution. Returns True if it was blocked."""
    defender = state.opponent(attacker)
    atk = state.side(attacker)
    dfd = state.side(defender)

    state.attacks_this_turn += 1
    state.attack = AttackState(
        target=target.instance_id,
        card=card,
        stage=stage_for(target.state),
        attacks_this_turn=state.attacks_this_turn,
    )
    state.phase = "defense_phase"
    state.message = f"Attacking {target.name}!" if attacker == "player" else f"AI attacks your {target.name}!"
    details = attack_details(card.card, target.name, target.state)
    state.add_log(attacker, "Attack", f"{reasoning}\n{details}" if reasoning else details)
    pacer.pause("attack")

    defense: HandCard | None
    if defender == "ai":
        decision = choose_defense(dfd.dc_hand, card.card, spec_for(state.difficulty), state.rng)
        defense = decision.card
    else:
        # The human side always blocks with the first matching card in hand order.
        defense = next((hc for hc in dfd.dc_hand if can_defend(card.card, hc.card)), None)

    if defense is not None:
        pacer.pause("defense")
        _discard(atk.ta_hand, atk.ta_discard, card)
        _discard(dfd.dc_hand, dfd.dc_discard, defense)
        dfd.successful_defenses += 1
        _draw_to_size(state, dfd.dc_hand, state.dc_deck, len(dfd.dc_hand) + state.config.redraw_bonus)

        blocked = defense_details(defense.card, card.card, target.name)
        state.add_log(defender, "Defended", blocked)
        if attacker == "player":
            state.add_log("player", "Attack Blocked", f"Outcome: Blocked\n{blocked}")
            state.message = "AI defended! Attack blocked."
        else:
            state.message = f"You defended with {defense_name(defense.card)}!"
    else:
        before = target.state
        label = HIT_LABELS[advance_asset(target)]
        if attacker == "player":
            state.message = f"Attack hit! {target.name} is now {label}"
        else:
            state.message = f"No defense! Your {target.name} is now {label}"
        state.add_log(attacker, "Attack Hit", f"Outcome: {label}\n{attack_details(card.card, target.name, before)}")
        _discard(atk.ta_hand, atk.ta_discard, card)

    state.phase = "attack_phase"
    state.attack = None
    _check_winner(state)
    return defense is not None


def _flip_attacker(state: GameState, next_attacker: Side) -> None:
    state.current_attacker = next_attacker
    state.turn_number += 1
    state.attacks_this_turn = 0
    state.attack = None
    state.selected_card = None
    state.selected_asset = None


def _reboot(state: GameState, who: Side) -> None:
    ps = state.side(who)
    # Least progressed standing asset pays the cost; board order breaks ties.
    victim = min(ps.active_assets(), key=lambda a: (state_index(a.state), a.damage))
    recovered = len(ps.dc_discard)
    for c in ps.dc_discard:
        ps.dc_hand.append(state.hand_card(c))
    ps.dc_discard.clear()
    label = HIT_LABELS[advance_asset(victim)]

    owner = "Your" if who == "player" else "AI's"
    state.message = f"{'You' if who == 'player' else 'AI'} rebooted! {owner} {victim.name} is now {label}"
    state.add_log(
        who,
        "Reboot",
        f"Recovered {recovered} defense cards from the discard pile.\nCost: {victim.name} is now {label}",
    )
    _check_winner(state)


def _run_ai_turn(state: GameState, pacer: Pacer) -> None:
    pacer.reset()
    spec = spec_for(state.difficulty)
    ai = state.ai
    player = state.player

    if state.config.allow_reboot and decide_reboot(ai.dc_hand, ai.dc_discard, ai.assets):
        _reboot(state, "ai")

    keep_attacking = True
    while keep_attacking and state.phase == "attack_phase":
        state.message = "AI is choosing a target..."
        pacer.pause("choose_target")
        target = choose_target(player.assets)
        if target is None:
            state.add_log("ai", "No Attack", "No valid target available.")
            break

        state.message = f"AI targets your {target.name}..."
        pacer.pause("choose_card")
        decision = choose_attack_card(ai.ta_hand, player.dc_hand, spec, state.rng)
        if decision.card is None:
            state.add_log("ai", "No Attack", "AI has no valid attack card.")
            break

        blocked = _resolve_attack(state, "ai", decision.card, target, pacer, reasoning=decision.reasoning)
        pacer.pause("resolve")
        if blocked or state.phase != "attack_phase":
            break
        follow_up = decide_continue(ai.ta_hand, player.assets, spec, state.rng)
        if follow_up.action != "attack":
            state.add_log("ai", "End Turn", follow_up.reasoning)
            keep_attacking = False

    if state.phase != "attack_phase":
        return
    _draw_to_size(state, ai.ta_hand, state.ta_deck, len(ai.ta_hand) + state.config.redraw_bonus)
    _flip_attacker(state, "player")
    state.message = "Your turn! Select a Threat Agent card to attack."


def _set_difficulty(state: GameState, action: SetDifficultyAction) -> StepResult:
    if state.phase != "difficulty_select":
        return _reject("Difficulty is already set.")
    if action.difficulty not in DIFFICULTIES:
        return _reject(f"Unknown difficulty: {action.difficulty}")
    state.difficulty = action.difficulty
    state.phase = "coin_flip"
    state.message = "Flipping coin to determine who attacks first..."
    return StepResult(ok=True)


def _coin_flip(state: GameState, action: CoinFlipAction, pacer: Pacer) -> StepResult:
    if state.phase != "coin_flip" or state.difficulty is None:
        return _reject("No coin flip pending.")
    pacer.pause("coin_flip")
    result: Side
    if action.result is not None:
        result = action.result
    else:
        result = "player" if state.rng.random() < 0.5 else "ai"

    state.coin_flip_result = result
    state.current_attacker = result
    state.phase = "attack_phase"
    if result == "player":
        state.add_log("player", "Coin Flip", "You won the coin flip! You attack first.")
        state.message = "Your turn! Select a Threat Agent card to attack."
        return StepResult(ok=True)

    state.add_log("ai", "Coin Flip", "AI won the coin flip! AI attacks first.")
    state.message = "AI is preparing to attack..."
    pacer.pause("coin_result")
    _run_ai_turn(state, pacer)
    return StepResult(ok=True)


def _select_card(state: GameState, action: SelectCardAction) -> StepResult:
    state.selected_card = action.instance_id
    return StepResult(ok=True)


def _select_asset(state: GameState, action: SelectAssetAction) -> StepResult:
    state.selected_asset = action.instance_id
    return StepResult(ok=True)


def _player_turn_error(state: GameState) -> str | None:
    if state.phase != "attack_phase":
        return "Not in the attack phase."
    if state.current_attacker != "player":
        return "Not your turn."
    return None


def _attack(state: GameState, pacer: Pacer) -> StepResult:
    err = _player_turn_error(state)
    if err:
        return _reject(err)
    if state.selected_card is None or state.selected_asset is None:
        return _reject("Select an attack card and a target asset.")
    card = find_hand_card(state.player.ta_hand, state.selected_card)
    if card is None:
        return _reject("Selected card is not in your attack hand.")
    target = state.ai.find_asset(state.selected_asset)
    if target is None:
        return _reject("Select one of the AI's assets.")
    if target.destroyed:
        return _reject("That asset is already destroyed.")

    _resolve_attack(state, "player", card, target, pacer)
    state.selected_card = None
    state.selected_asset = None
    return StepResult(ok=True)


def _end_turn(state: GameState, pacer: Pacer) -> StepResult:
    err = _player_turn_error(state)
    if err:
        return _reject(err)
    player = state.player
    _draw_to_size(state, player.ta_hand, state.ta_deck, len(player.ta_hand) + state.config.redraw_bonus)
    _flip_attacker(state, "ai")
    state.message = "AI's turn to attack..."
    pacer.pause("end_turn")
    _run_ai_turn(state, pacer)
    return StepResult(ok=True)


def _player_reboot(state: GameState) -> StepResult:
    if not state.config.allow_reboot:
        return _reject("Reboot is disabled.")
    err = _player_turn_error(state)
    if err:
        return _reject(err)
    if not state.player.dc_discard:
        return _reject("Nothing to recover: your defense discard is empty.")
    if len(state.player.active_assets()) < 2:
        return _reject("Reboot would cost your last asset.")
    _reboot(state, "player")
    return StepResult(ok=True)


def step(state: GameState, action: Action, pacer: Pacer | None = None) -> StepResult:
    """Apply a single action to the game state.

    This mutates `state` in-place but remains deterministic for a given
    (seed, action sequence). Rejected actions leave the state untouched.
    """
    if state.finished:
        return _reject("Game already ended.")
    pacer = pacer or Pacer()
    logged_before = state.log_total

    if isinstance(action, SetDifficultyAction):
        result = _set_difficulty(state, action)
    elif isinstance(action, CoinFlipAction):
        result = _coin_flip(state, action, pacer)
    elif isinstance(action, SelectCardAction):
        result = _select_card(state, action)
    elif isinstance(action, SelectAssetAction):
        result = _select_asset(state, action)
    elif isinstance(action, AttackAction):
        result = _attack(state, pacer)
    elif isinstance(action, EndTurnAction):
        result = _end_turn(state, pacer)
    elif isinstance(action, RebootAction):
        result = _player_reboot(state)
    else:
        return _reject("Unknown action.")

    if result.ok:
        state.history.append(action)
        new_entries = min(state.log_total - logged_before, len(state.action_log))
        result.events = state.action_log[len(state.action_log) - new_entries :]
    return result


def _make_asset(state: GameState, card: AssetCard) -> CyberAsset:
    return CyberAsset(instance_id=state.issue_id(), card=card)


def new_game(
    catalog: CardCatalog,
    seed: int | None = None,
    config: GameConfig | None = None,
    rng: random.Random | None = None,
) -> GameState:
    """Build, shuffle and deal a fresh game waiting for a difficulty pick.

    `rng` overrides the seeded generator (tests stub it to script every draw).
    """
    cfg = config or GameConfig()
    if rng is None:
        if seed is None:
            seed = random.randrange(2**32)
        rng = random.Random(seed)

    deck = build_full_deck(catalog)
    ta_pile = deck.attack_pile()
    dc_pile = deck.defense_pile()
    ta_assets = list(deck.ta_assets)
    dc_assets = list(deck.dc_assets)
    shuffle(rng, ta_pile)
    shuffle(rng, dc_pile)
    shuffle(rng, ta_assets)
    shuffle(rng, dc_assets)

    state = GameState(
        catalog=catalog,
        config=cfg,
        seed=seed,
        rng=rng,
        player=PlayerState(assets=[], ta_hand=[], dc_hand=[]),
        ai=PlayerState(assets=[], ta_hand=[], dc_hand=[]),
        ta_deck=ta_pile,
        dc_deck=dc_pile,
        message="Choose a difficulty to start.",
    )

    for ps in (state.player, state.ai):
        _draw_to_size(state, ps.ta_hand, state.ta_deck, cfg.hand_size)
        _draw_to_size(state, ps.dc_hand, state.dc_deck, cfg.hand_size)

    # The player defends the defense-suit face cards, the AI the threat-suit ones.
    state.player.assets = [_make_asset(state, c) for c in dc_assets[: cfg.assets_per_player]]
    state.ai.assets = [_make_asset(state, c) for c in ta_assets[: cfg.assets_per_player]]
    return state


def replay(
    catalog: CardCatalog,
    seed: int,
    actions: Iterable[Action],
    config: GameConfig | None = None,
) -> GameState:
    state = new_game(catalog, seed=seed, config=config)
    for a in actions:
        step(state, a)
        if state.finished:
            break
    return state
