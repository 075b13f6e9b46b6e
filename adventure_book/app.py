import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI

from adventure_book.routes import router
from adventure_book.storage import Storage

load_dotenv(Path(__file__).parent.parent / ".env")

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


def create_app(data_dir: Path | None = None) -> FastAPI:
    resolved = data_dir or Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR)))

    app = FastAPI(title="Adventure Book")
    app.state.storage = Storage(resolved)
    app.state.play_sessions = {}
    app.include_router(router, prefix="/api")
    return app
