import argparse
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

import sys
from pathlib import Path

# Add project root to path for package imports
base_dir = Path(__file__).parent
sys.path.insert(0, str(base_dir))

from db.database import init_db
from config import load_config
from routes import auth, themes, game, stats  # Import routers
from utils.errors import CortexError

logger = logging.getLogger(__name__)


def configure_logging(config: dict) -> None:
    logging.basicConfig(
        level=config["logging"]["level"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# First-run init
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: init DB and config
    config = load_config()  # Ensures config exists
    configure_logging(config)
    init_db()
    yield


app = FastAPI(title="Cortex", description="Themes, quizzes and vocabulary drills with knowledge tracking", lifespan=lifespan)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(themes.router, prefix="/api/themes", tags=["themes"])
app.include_router(game.router, prefix="/api/game", tags=["game"])
app.include_router(stats.router, prefix="/api/stats", tags=["stats"])


@app.exception_handler(CortexError)
async def cortex_error_handler(request: Request, exc: CortexError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/")
async def home():
    return {"message": "API is running"}


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Cortex App")
    parser.add_argument("--init", action="store_true", help="Initialize DB and config")
    parser.add_argument("--dev", action="store_true", help="Run in dev mode with reload")
    args = parser.parse_args()
    config = load_config()  # Ensures config is copied if missing
    if args.init:
        init_db()
        print("DB initialized and config copied to ~/.cortex/")
        exit(0)
    # Run server
    server_cfg = config["server"]
    uvicorn.run(
        "main:app",
        host=server_cfg["host"],
        port=server_cfg["port"],
        reload=args.dev,
        log_level=config["logging"]["level"].lower(),
    )
