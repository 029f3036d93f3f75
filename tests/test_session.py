from __future__ import annotations

import json
import time
from pathlib import Path

from owaspcards.engine.pacing import Pacer, SkipToken
from owaspcards.services.session import GameSession
from owaspcards.services.telemetry import TelemetryService

from support import load_catalog


class RecordingPacer(Pacer):
    def __init__(self) -> None:
        super().__init__(scale=0.0)
        self.steps: list[str] = []

    def pause(self, step: str) -> None:
        self.steps.append(step)
        self.token.request()


def test_session_driver_contract(tmp_path: Path) -> None:
    telemetry = TelemetryService(tmp_path / "telemetry.jsonl")
    session = GameSession(load_catalog(), seed=3, telemetry=telemetry, auto_flip=False)
    seen: list[dict[str, object]] = []
    unsubscribe = session.subscribe(seen.append)

    snap = session.set_difficulty("easy")
    assert snap["phase"] == "coin_flip"
    assert snap["difficulty"] == "easy"

    snap = session.flip_coin("player")
    assert snap["phase"] == "attack_phase"
    assert snap["current_attacker"] == "player"

    snap = session.attack()
    assert session.last_result is not None and not session.last_result.ok
    assert snap["phase"] == "attack_phase"

    card = session.state.player.ta_hand[0]
    target = session.state.ai.assets[0]
    session.select_card(card.instance_id)
    snap = session.select_asset(target.instance_id)
    assert snap["selected_card"] == card.instance_id
    assert snap["selected_asset"] == target.instance_id

    snap = session.attack()
    assert session.last_result is not None and session.last_result.ok
    assert snap["selected_card"] is None
    assert len(seen) == 6
    assert seen[-1] == snap

    unsubscribe()
    session.select_card(None)
    assert len(seen) == 6

    records = [json.loads(line) for line in (tmp_path / "telemetry.jsonl").read_text(encoding="utf-8").splitlines()]
    assert [r["type"] for r in records][:2] == ["game_started", "difficulty_selected"]
    assert records[0]["payload"]["seed"] == 3


def test_set_difficulty_flips_coin_by_default() -> None:
    session = GameSession(load_catalog(), seed=10)
    snap = session.set_difficulty("hard")
    assert snap["coin_flip_result"] in ("player", "ai")
    assert snap["phase"] in ("attack_phase", "player_won", "ai_won")
    if snap["phase"] == "attack_phase":
        assert snap["current_attacker"] == "player"


def test_reset_replaces_state() -> None:
    session = GameSession(load_catalog(), seed=10)
    session.set_difficulty("hard")
    old = session.state
    snap = session.reset(seed=11)
    assert session.state is not old
    assert snap["phase"] == "difficulty_select"
    assert snap["seed"] == 11
    assert snap["action_log"] == []


def test_skip_changes_pacing_only() -> None:
    catalog = load_catalog()
    plain = GameSession(catalog, seed=21)
    paced = GameSession(catalog, seed=21, pacer=RecordingPacer())

    for s in (plain, paced):
        s.set_difficulty("brutal")
        for _ in range(6):
            if s.state.finished:
                break
            s.end_turn()

    assert plain.snapshot() == paced.snapshot()
    assert isinstance(paced.pacer, RecordingPacer)
    assert "choose_target" in paced.pacer.steps


def test_requested_skip_cuts_waits_short() -> None:
    token = SkipToken()
    pacer = Pacer(scale=100.0, token=token)
    token.request()
    started = time.monotonic()
    pacer.pause("attack")
    assert time.monotonic() - started < 1.0

    pacer.reset()
    assert not token.requested


def test_session_request_skip_sets_token() -> None:
    session = GameSession(load_catalog(), seed=1)
    assert not session.pacer.token.requested
    session.request_skip()
    assert session.pacer.token.requested


def test_game_end_reported_once(tmp_path: Path) -> None:
    telemetry = TelemetryService(tmp_path / "t.jsonl")
    session = GameSession(load_catalog(), seed=5, telemetry=telemetry, auto_flip=False)
    session.set_difficulty("hard")
    session.flip_coin("player")
    state = session.state
    for a in state.ai.assets[:2]:
        a.state = "rotated"
        a.damage = 2
    state.ai.dc_hand = []
    for a in state.ai.assets[:2]:
        session.select_card(state.player.ta_hand[0].instance_id)
        session.select_asset(a.instance_id)
        session.attack()
    assert state.phase == "player_won"
    session.end_turn()

    types = [json.loads(line)["type"] for line in (tmp_path / "t.jsonl").read_text(encoding="utf-8").splitlines()]
    assert types.count("game_ended") == 1
