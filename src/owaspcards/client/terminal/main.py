from __future__ import annotations

import argparse
import sys
from pathlib import Path

from owaspcards.engine.pacing import Pacer
from owaspcards.engine.state import DIFFICULTIES, GameConfig
from owaspcards.paths import get_paths
from owaspcards.services.content import ContentError, ContentService
from owaspcards.services.session import GameSession
from owaspcards.services.telemetry import TelemetryService

from .app import App


def main() -> int:
    parser = argparse.ArgumentParser(prog="owaspcards", description="OWASP Top Ten card game (terminal)")
    parser.add_argument("--difficulty", choices=DIFFICULTIES, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--pace", type=float, default=0.0, help="AI pacing scale (0 disables delays)")
    parser.add_argument("--reboot", action="store_true", help="enable the Reboot action")
    parser.add_argument("--no-telemetry", action="store_true")
    parser.add_argument("--userdata", type=Path, default=None, help="directory for telemetry output")
    args = parser.parse_args()

    paths = get_paths(args.userdata)
    telemetry = TelemetryService(paths.userdata_dir / "telemetry.jsonl", enabled=not args.no_telemetry)
    content = ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir)
    try:
        catalog = content.load_catalog()
    except ContentError as e:
        telemetry.log("content_error", {"error": str(e)})
        print(f"Could not load card catalog:\n{e}", file=sys.stderr)
        return 1

    session = GameSession(
        catalog,
        GameConfig(allow_reboot=args.reboot),
        seed=args.seed,
        pacer=Pacer(scale=args.pace),
        telemetry=telemetry,
    )
    app = App(session, difficulty=args.difficulty)
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
