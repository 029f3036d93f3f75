"""Deterministic, headless rules engine for the OWASP Top Ten card game.

IMPORTANT: This package must never import a UI toolkit or touch the filesystem.
"""

from .actions import (
    AttackAction,
    CoinFlipAction,
    EndTurnAction,
    RebootAction,
    SelectAssetAction,
    SelectCardAction,
    SetDifficultyAction,
)
from .ai import AISpec
from .match import StepResult, new_game, replay, step
from .pacing import Pacer, SkipToken
from .rules import can_defend
from .state import GameConfig, GameState
from .types import CardCatalog, Difficulty, Side

__all__ = [
    "AISpec",
    "AttackAction",
    "CardCatalog",
    "CoinFlipAction",
    "Difficulty",
    "EndTurnAction",
    "GameConfig",
    "GameState",
    "Pacer",
    "RebootAction",
    "SelectAssetAction",
    "SelectCardAction",
    "SetDifficultyAction",
    "Side",
    "SkipToken",
    "StepResult",
    "can_defend",
    "new_game",
    "replay",
    "step",
]
