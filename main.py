"""Adventure Book — local launcher. Serves the API with uvicorn."""

import argparse
import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "127.0.0.1")
PORT = os.getenv("PORT", "13013")


def main():
    parser = argparse.ArgumentParser(description="Adventure Book local server")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Data storage directory (default: ./data)")
    parser.add_argument("--demo", action="store_true",
                        help="Clean and create the demo adventure")
    parser.add_argument("--reload", action="store_true",
                        help="Restart the server when source files change")
    args = parser.parse_args()

    if args.data_dir:
        os.environ["DATA_DIR"] = str(args.data_dir.resolve())

    if args.demo:
        from adventure_book.demo import create_demo_data
        from adventure_book.storage import Storage
        story_id = create_demo_data(Storage(args.data_dir or ROOT / "data"))
        print(f"Created demo adventure {story_id}")

    print(f"Starting Adventure Book on http://{HOST}:{PORT} ...")
    uvicorn.run(
        "adventure_book.app:create_app",
        factory=True,
        host=HOST,
        port=int(PORT),
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
