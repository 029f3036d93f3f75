from __future__ import annotations

from typing import Callable

from owaspcards.engine.actions import (
    Action,
    AttackAction,
    CoinFlipAction,
    EndTurnAction,
    RebootAction,
    SelectAssetAction,
    SelectCardAction,
    SetDifficultyAction,
)
from owaspcards.engine.match import StepResult, new_game, step
from owaspcards.engine.pacing import Pacer
from owaspcards.engine.serialize import snapshot
from owaspcards.engine.state import GameConfig, GameState
from owaspcards.engine.types import CardCatalog, Difficulty, Side

from .telemetry import TelemetryService

Snapshot = dict[str, object]
Listener = Callable[[Snapshot], None]


class GameSession:
    """Owns the current GameState and exposes the driver contract to a UI.

    Every call applies at most a few engine actions and returns a fresh
    snapshot; subscribed listeners receive the same snapshot.
    """

    def __init__(
        self,
        catalog: CardCatalog,
        config: GameConfig | None = None,
        *,
        seed: int | None = None,
        pacer: Pacer | None = None,
        telemetry: TelemetryService | None = None,
        auto_flip: bool = True,
    ) -> None:
        self._catalog = catalog
        self._config = config or GameConfig()
        self.pacer = pacer or Pacer()
        self.telemetry = telemetry
        self.auto_flip = auto_flip
        self._listeners: list[Listener] = []
        self.state: GameState = new_game(catalog, seed=seed, config=self._config)
        self.last_result: StepResult | None = None
        self._reported_end = False
        self._log("game_started", {"seed": self.state.seed})

    def _log(self, event_type: str, payload: dict[str, object]) -> None:
        if self.telemetry is not None:
            self.telemetry.log(event_type, payload)

    def _apply(self, action: Action) -> StepResult:
        result = step(self.state, action, self.pacer)
        self.last_result = result
        if self.state.finished and not self._reported_end:
            self._reported_end = True
            self._log(
                "game_ended",
                {
                    "seed": self.state.seed,
                    "phase": self.state.phase,
                    "difficulty": self.state.difficulty,
                    "turns": self.state.turn_number,
                    "message": self.state.message,
                },
            )
        return result

    def _publish(self) -> Snapshot:
        snap = snapshot(self.state)
        for listener in list(self._listeners):
            listener(snap)
        return snap

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> Snapshot:
        return snapshot(self.state)

    def set_difficulty(self, difficulty: Difficulty) -> Snapshot:
        result = self._apply(SetDifficultyAction(difficulty=difficulty))
        if result.ok:
            self._log("difficulty_selected", {"difficulty": difficulty})
            if self.auto_flip:
                self._apply(CoinFlipAction())
        return self._publish()

    def flip_coin(self, result: Side | None = None) -> Snapshot:
        self._apply(CoinFlipAction(result=result))
        return self._publish()

    def select_card(self, instance_id: int | None) -> Snapshot:
        self._apply(SelectCardAction(instance_id=instance_id))
        return self._publish()

    def select_asset(self, instance_id: int | None) -> Snapshot:
        self._apply(SelectAssetAction(instance_id=instance_id))
        return self._publish()

    def attack(self) -> Snapshot:
        self._apply(AttackAction())
        return self._publish()

    def end_turn(self) -> Snapshot:
        self._apply(EndTurnAction())
        return self._publish()

    def reboot(self) -> Snapshot:
        self._apply(RebootAction())
        return self._publish()

    def request_skip(self) -> None:
        self.pacer.token.request()

    def reset(self, seed: int | None = None) -> Snapshot:
        self.state = new_game(self._catalog, seed=seed, config=self._config)
        self.last_result = None
        self._reported_end = False
        self.pacer.reset()
        self._log("game_started", {"seed": self.state.seed})
        return self._publish()
