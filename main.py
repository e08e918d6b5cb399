import argparse
import logging
import os
from logging.handlers import RotatingFileHandler

import uvicorn
from fastapi import FastAPI
from contextlib import asynccontextmanager

import sys
from pathlib import Path

# Add project root to path for package imports
base_dir = Path(__file__).parent
sys.path.insert(0, str(base_dir))

from db.database import init_db
from config import load_config
from routes import revision, plans, quiz, bookmarks, chapters  # Import routers


# --- Logging Setup ---
def setup_logging(config=None):
    config = config or load_config()
    log_cfg = config["logging"]
    level = getattr(logging, log_cfg["level"], logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    os.makedirs(log_cfg["dir"], exist_ok=True)
    log_path = os.path.join(log_cfg["dir"], log_cfg["file"])
    if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        root.addHandler(file_handler)
    # Also log to the console
    logging.basicConfig(level=level)


# First-run init
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: init config, logging and DB
    setup_logging(load_config())  # Ensures config exists
    init_db()
    yield


app = FastAPI(
    title="VocabCoach",
    description="Revision sessions and learning plans for vocabulary practice",
    lifespan=lifespan,
)

# Include routers
app.include_router(revision.router, prefix="/revision", tags=["revision"])
app.include_router(plans.router, prefix="/plans", tags=["plans"])
app.include_router(quiz.router, prefix="/quiz", tags=["quiz"])
app.include_router(bookmarks.router, prefix="/bookmarks", tags=["bookmarks"])
app.include_router(chapters.router, prefix="/chapters", tags=["chapters"])


@app.get("/")
async def home():
    return {"app": "vocabcoach", "status": "ok"}


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="VocabCoach App")
    parser.add_argument("--init", action="store_true", help="Initialize DB and config")
    parser.add_argument("--dev", action="store_true", help="Run in dev mode with reload")
    args = parser.parse_args()
    if args.init:
        load_config()  # Ensures config is copied if missing
        init_db()
        print("DB initialized and config copied to ~/.vocabcoach/")
        exit(0)
    # Run server
    port = 8000
    reload = args.dev
    uvicorn.run("main:app", host="127.0.0.1", port=port, reload=reload, log_level="info")
