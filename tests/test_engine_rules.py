from __future__ import annotations

import pytest

from owaspcards.engine.deck import build_full_deck
from owaspcards.engine.rules import (
    ASSET_STATES,
    advance_asset,
    can_defend,
    next_asset_state,
    stage_for,
    state_index,
)
from owaspcards.engine.types import (
    AssetCard,
    DefenseControlCard,
    JokerCard,
    ThreatAgentCard,
)

from support import asset, load_catalog


def test_can_defend_exhaustive() -> None:
    deck = build_full_deck(load_catalog())
    every_card = [*deck.ta_cards, *deck.dc_cards, *deck.ta_assets, *deck.dc_assets, *deck.jokers]

    for attack in every_card:
        for defense in every_card:
            expected = (
                isinstance(attack, JokerCard)
                or isinstance(defense, JokerCard)
                or (
                    isinstance(attack, ThreatAgentCard)
                    and isinstance(defense, DefenseControlCard)
                    and attack.value == defense.value
                )
            )
            assert can_defend(attack, defense) is expected, (attack.id, defense.id)


def test_matching_value_blocks_only_same_value() -> None:
    deck = build_full_deck(load_catalog())
    five = next(c for c in deck.ta_cards if c.value == 5)
    for dc in deck.dc_cards:
        assert can_defend(five, dc) is (dc.value == 5)
    # Swapped roles never match, even with equal values.
    dc_five = next(c for c in deck.dc_cards if c.value == 5)
    assert not can_defend(dc_five, five)


def test_assets_never_block_or_attack() -> None:
    deck = build_full_deck(load_catalog())
    card: AssetCard = deck.ta_assets[0]
    assert not can_defend(deck.ta_cards[0], card)
    assert not can_defend(card, deck.dc_cards[0])
    assert can_defend(card, deck.jokers[1])


def test_lifecycle_order_and_stages() -> None:
    assert ASSET_STATES == ("facedown", "revealed", "rotated", "destroyed")
    assert next_asset_state("facedown") == "revealed"
    assert next_asset_state("revealed") == "rotated"
    assert next_asset_state("rotated") == "destroyed"
    assert next_asset_state("destroyed") == "destroyed"

    assert stage_for("facedown") == "observation"
    assert stage_for("revealed") == "assessment"
    assert stage_for("rotated") == "pwn"
    with pytest.raises(ValueError):
        stage_for("destroyed")


def test_asset_monotonic_damage_tracks_state() -> None:
    a = asset(load_catalog(), instance_id=1)
    seen = [a.state]
    for _ in range(3):
        before = state_index(a.state)
        advance_asset(a)
        assert state_index(a.state) == before + 1
        assert a.damage == state_index(a.state)
        seen.append(a.state)
    assert seen == ["facedown", "revealed", "rotated", "destroyed"]

    with pytest.raises(ValueError):
        advance_asset(a)
    assert a.state == "destroyed"
    assert a.damage == 3
