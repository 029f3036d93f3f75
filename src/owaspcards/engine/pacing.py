from __future__ import annotations

import threading

# Seconds of display pacing before each step of a turn, at scale 1.0.
PACING: dict[str, float] = {
    "coin_flip": 2.0,
    "coin_result": 1.5,
    "end_turn": 1.0,
    "choose_target": 0.7,
    "choose_card": 0.7,
    "attack": 1.2,
    "defense": 1.0,
    "resolve": 1.2,
}


class SkipToken:
    """Cooperative cancellation for pacing delays.

    Requesting a skip only shortens waits; it never changes a decision.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def request(self) -> None:
        self._event.set()

    def clear(self) -> None:
        self._event.clear()

    @property
    def requested(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> None:
        self._event.wait(seconds)


class Pacer:
    def __init__(self, scale: float = 0.0, token: SkipToken | None = None) -> None:
        self.scale = scale
        self.token = token or SkipToken()

    def pause(self, step: str) -> None:
        if self.scale <= 0:
            return
        if self.token.requested:
            return
        self.token.wait(PACING.get(step, 0.0) * self.scale)

    def reset(self) -> None:
        self.token.clear()
