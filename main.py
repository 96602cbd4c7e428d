"""Speaker Portraits — dev launcher. Starts the host API in watch mode."""

import argparse
import os
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = os.getenv("PORT", "13013")


def main():
    parser = argparse.ArgumentParser(description="Speaker Portraits dev launcher")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Session storage directory (default: ./data)")
    parser.add_argument("--demo", action="store_true",
                        help="Clean sessions and create a demo session")
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", default=PORT)
    args = parser.parse_args()

    if args.demo:
        from backend.demo import create_demo_data
        from portrait_stage.storage import Storage
        create_demo_data(Storage(args.data_dir or ROOT / "data"))

    # Build env for the subprocess so the app picks up the same data dir
    env = os.environ.copy()
    if args.data_dir:
        env["DATA_DIR"] = str(args.data_dir.resolve())

    print(f"Starting backend on http://localhost:{args.port} ...")
    try:
        subprocess.run(
            [sys.executable, "-m", "uvicorn", "backend.app:app", "--reload",
             "--host", args.host, "--port", str(args.port)],
            cwd=ROOT, env=env, check=False,
        )
    except KeyboardInterrupt:
        print("\nShutting down...")


if __name__ == "__main__":
    main()
