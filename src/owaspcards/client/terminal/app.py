from __future__ import annotations

import signal
from typing import Callable

from owaspcards.engine.rules import ASSET_STATE_LABELS
from owaspcards.engine.state import DIFFICULTIES, CyberAsset, GameState, HandCard
from owaspcards.engine.types import Difficulty, card_title
from owaspcards.services.session import GameSession

HELP = """Commands:
  attack <card#> <asset#>   attack an AI asset with a card from your attack hand
  end                       end your turn (the AI attacks next)
  reboot                    recover your defense discard at the cost of one asset step
  log [n]                   show the last n action log entries (default 5)
  reset                     start a new game
  help                      show this help
  quit                      leave the game"""


def _asset_line(i: int, a: CyberAsset) -> str:
    return f"  [{i}] {a.name:<24} {ASSET_STATE_LABELS[a.state]:<10} damage {a.damage}/3"


def _hand_line(i: int, hc: HandCard) -> str:
    return f"  [{i}] {card_title(hc.card)}"


class App:
    def __init__(self, session: GameSession, difficulty: Difficulty | None = None) -> None:
        self.session = session
        self.difficulty = difficulty
        self.running = True
        self._seen_log = 0

    @property
    def state(self) -> GameState:
        return self.session.state

    def _prompt_difficulty(self) -> Difficulty | None:
        while True:
            raw = input(f"Difficulty ({'/'.join(DIFFICULTIES)}): ").strip().lower()
            if raw in ("q", "quit"):
                return None
            for d in DIFFICULTIES:
                if raw == d:
                    return d
            print("Pick one of:", ", ".join(DIFFICULTIES))

    def _with_skip(self, fn: Callable[[], object]) -> None:
        # Ctrl-C while the AI plays only skips the remaining pacing delays.
        previous = signal.signal(signal.SIGINT, lambda *_: self.session.request_skip())
        try:
            fn()
        finally:
            signal.signal(signal.SIGINT, previous)

    def _print_new_log(self) -> None:
        total = self.state.log_total
        fresh = min(total - self._seen_log, len(self.state.action_log))
        for entry in self.state.action_log[len(self.state.action_log) - fresh :]:
            who = "You" if entry.actor == "player" else "AI"
            print(f"- {who}: {entry.action}")
            for line in entry.details.splitlines():
                print(f"    {line}")
        self._seen_log = total

    def _render(self) -> None:
        s = self.state
        print()
        print(f"=== Turn {s.turn_number} | {s.phase} | attacker: {s.current_attacker} ===")
        print(f"Defenses  you {s.player.successful_defenses}  AI {s.ai.successful_defenses}")
        print(f"Draw piles  attack {len(s.ta_deck)}  defense {len(s.dc_deck)}")
        print("AI assets:")
        for i, a in enumerate(s.ai.assets):
            print(_asset_line(i, a))
        print("Your assets:")
        for i, a in enumerate(s.player.assets):
            print(_asset_line(i, a))
        print("Your attack hand:")
        for i, hc in enumerate(s.player.ta_hand):
            print(_hand_line(i, hc))
        print("Your defense hand:")
        for i, hc in enumerate(s.player.dc_hand):
            print(_hand_line(i, hc))
        print(f">> {s.message}")

    def _attack(self, args: list[str]) -> None:
        if len(args) != 2 or not all(a.isdigit() for a in args):
            print("Usage: attack <card#> <asset#>")
            return
        ci, ti = int(args[0]), int(args[1])
        hand = self.state.player.ta_hand
        assets = self.state.ai.assets
        if ci >= len(hand) or ti >= len(assets):
            print("No such card or asset.")
            return
        self.session.select_card(hand[ci].instance_id)
        self.session.select_asset(assets[ti].instance_id)
        self.session.attack()
        self._report_rejection()

    def _report_rejection(self) -> None:
        res = self.session.last_result
        if res is not None and not res.ok and res.error:
            print(f"!! {res.error}")

    def _handle(self, line: str) -> None:
        parts = line.split()
        if not parts:
            return
        cmd, args = parts[0].lower(), parts[1:]
        if cmd in ("quit", "q", "exit"):
            self.running = False
        elif cmd in ("help", "h", "?"):
            print(HELP)
        elif cmd in ("attack", "a"):
            self._attack(args)
        elif cmd in ("end", "e"):
            self._with_skip(self.session.end_turn)
            self._report_rejection()
        elif cmd == "reboot":
            self.session.reboot()
            self._report_rejection()
        elif cmd == "log":
            n = int(args[0]) if args and args[0].isdigit() else 5
            for entry in self.state.action_log[-n:]:
                print(f"- {entry.actor}: {entry.action}\n    " + entry.details.replace("\n", "\n    "))
        elif cmd == "reset":
            self.session.reset()
            self._seen_log = 0
            self.running = self._start()
        else:
            print(f"Unknown command: {cmd} (try 'help')")

    def _start(self) -> bool:
        difficulty = self.difficulty or self._prompt_difficulty()
        if difficulty is None:
            return False
        self._with_skip(lambda: self.session.set_difficulty(difficulty))
        return True

    def run(self) -> int:
        try:
            if not self._start():
                return 0
            print(HELP)
            while self.running:
                self._print_new_log()
                self._render()
                if self.state.finished:
                    again = input("Play again? [y/N] ").strip().lower()
                    if again != "y":
                        break
                    self._handle("reset")
                    continue
                self._handle(input("> "))
        except (EOFError, KeyboardInterrupt):
            print()
        return 0
