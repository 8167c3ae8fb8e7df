"""Medieval Shop — dev launcher.

    python main.py serve    API server on BACKEND_PORT in watch mode (default)
    python main.py kiosk    headless kiosk in the terminal, against a running server
"""

import argparse
import asyncio
import logging
import os
import subprocess
import sys
import uuid
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "0.0.0.0")
BACKEND_PORT = os.getenv("BACKEND_PORT", "5000")


def serve(args: argparse.Namespace) -> int:
    env = os.environ.copy()
    if args.data_dir:
        env["DATA_DIR"] = str(args.data_dir.resolve())

    print(f"Starting server on http://localhost:{BACKEND_PORT} ...")
    proc = subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "medieval_shop.app:create_app", "--factory",
         "--reload", "--host", HOST, "--port", BACKEND_PORT, "--log-level", args.log_level],
        cwd=ROOT, env=env,
    )
    try:
        return proc.wait()
    except KeyboardInterrupt:
        print("\nShutting down...")
        proc.terminate()
        return proc.wait()


async def play(args: argparse.Namespace) -> None:
    from medieval_shop.kiosk import HeadlessStage, Kiosk, KioskClient, Timings
    from medieval_shop.models import ActorPhase, Success

    client = KioskClient(args.visitor, base_url=args.api_url)
    config = await client.get_settings()
    kiosk = Kiosk(client, HeadlessStage(), config, user_agent=args.user_agent,
                  timings=Timings(approach=1.0, depart=1.0))
    at_counter = asyncio.Event()
    kiosk.lifecycle.on_phase(
        lambda actor: at_counter.set() if actor.phase is ActorPhase.AWAITING_ANSWER else None
    )

    await kiosk.start()
    try:
        while True:
            await at_counter.wait()
            at_counter.clear()
            await asyncio.sleep(0)
            session = kiosk.dialogue.session
            print(f"\nThe {session.actor_type} asketh: {session.question}")
            answer = await asyncio.to_thread(input, "Thy counsel (blank line to close shop): ")
            if not answer.strip():
                return
            outcome = await kiosk.dialogue.submit(answer)
            if isinstance(outcome, Success):
                print(outcome.feedback_text)
                if outcome.reaction:
                    print(outcome.reaction)
            elif outcome is not None:
                print(outcome.reason)
            kiosk.dialogue.dismiss()
    finally:
        await kiosk.stop()


def main():
    parser = argparse.ArgumentParser(description="Medieval Shop dev launcher")
    parser.add_argument("command", nargs="?", default="serve", choices=["serve", "kiosk"])
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Server data directory (default: ./data)")
    parser.add_argument("--log-level", default="info",
                        choices=["debug", "info", "warning", "error"],
                        help="Log level (default: info)")
    parser.add_argument("--api-url", default=f"http://localhost:{BACKEND_PORT}/api",
                        help="Server the kiosk talks to")
    parser.add_argument("--visitor", default=f"terminal-{uuid.uuid4().hex[:8]}",
                        help="Visitor id for the kiosk session")
    parser.add_argument("--user-agent", default="",
                        help="User-Agent sent on profile lookup (selects bonus NPCs)")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if args.command == "kiosk":
        try:
            asyncio.run(play(args))
        except KeyboardInterrupt:
            pass
        return 0
    return serve(args)


if __name__ == "__main__":
    sys.exit(main())
