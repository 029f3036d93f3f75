from __future__ import annotations

from dataclasses import dataclass

from .types import Difficulty, Side


@dataclass(frozen=True)
class SetDifficultyAction:
    difficulty: Difficulty


@dataclass(frozen=True)
class CoinFlipAction:
    # Forces the outcome when set; otherwise the flip draws from the game RNG.
    result: Side | None = None


@dataclass(frozen=True)
class SelectCardAction:
    instance_id: int | None


@dataclass(frozen=True)
class SelectAssetAction:
    instance_id: int | None


@dataclass(frozen=True)
class AttackAction:
    pass


@dataclass(frozen=True)
class EndTurnAction:
    pass


@dataclass(frozen=True)
class RebootAction:
    pass


Action = (
    SetDifficultyAction
    | CoinFlipAction
    | SelectCardAction
    | SelectAssetAction
    | AttackAction
    | EndTurnAction
    | RebootAction
)
