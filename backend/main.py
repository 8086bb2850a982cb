"""
Muddy Rogue Backend API

FastAPI server providing:
- Game sessions over one shared, read-only room graph
- Command, look and minimap endpoints per session
- Per-session display settings
"""

import os
import sys
import logging
import threading
import uuid
from typing import Optional
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Add mud_client to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'mud_client'))

from muddy import GameSession, SessionConfig, Settings, World
from muddy.content import load_world_from_dir

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(level=os.getenv("MUDDY_LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)


# Loaded once at startup, shared read-only by every session
world: Optional[World] = None
config = SessionConfig()

sessions: dict[str, GameSession] = {}
sessions_lock = threading.Lock()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global world, config
    config = SessionConfig.from_env()
    logger.info(f"Loading content from {config.content_dir}")
    world = load_world_from_dir(config.content_dir)
    logger.info("Starting Muddy Rogue backend")
    yield
    with sessions_lock:
        sessions.clear()
    logger.info("Muddy Rogue backend shutdown")


app = FastAPI(
    title="Muddy Rogue API",
    description="Room graph navigation and minimap backend",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Pydantic models
class CommandRequest(BaseModel):
    command: str


class SettingsRequest(BaseModel):
    word_wrap_enabled: Optional[bool] = None
    word_wrap_length: Optional[int] = Field(default=None, ge=1)


def get_session(session_id: str) -> GameSession:
    with sessions_lock:
        session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


# REST API Endpoints
@app.get("/")
def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "Muddy Rogue Backend",
        "rooms": len(world.graph) if world else 0,
        "timestamp": datetime.now().isoformat(),
    }


@app.post("/api/sessions")
def create_session():
    """Start a new game at the world's starting room."""
    if world is None:
        raise HTTPException(status_code=503, detail="World not loaded")

    session_id = uuid.uuid4().hex
    # Settings are kept in memory per session; only the terminal client persists them
    session = GameSession.from_world(
        world,
        settings=Settings(),
        minimap_distance=config.minimap_distance,
    )

    with sessions_lock:
        sessions[session_id] = session

    logger.info(f"Created session {session_id} at {session.location}")
    return {
        "session_id": session_id,
        "location": session.location.key,
    }


@app.get("/api/sessions/{session_id}")
def get_session_state(session_id: str):
    """Get session state."""
    return get_session(session_id).get_state()


@app.get("/api/sessions/{session_id}/start")
def get_start_message(session_id: str):
    """Welcome text and the starting room."""
    return {"messages": get_session(session_id).start_messages()}


@app.post("/api/sessions/{session_id}/command")
def send_command(session_id: str, request: CommandRequest):
    """Run a game command."""
    session = get_session(session_id)
    messages = session.handle_command(request.command)
    return {
        "command": request.command,
        "messages": messages,
        "location": session.location.key,
    }


@app.get("/api/sessions/{session_id}/minimap")
def get_minimap(session_id: str, distance: Optional[int] = None):
    """Rooms around the player with grid coordinates."""
    if distance is not None and distance < 0:
        raise HTTPException(status_code=422, detail="distance must not be negative")

    nodes = get_session(session_id).minimap(distance)
    return {"nodes": [node.to_dict() for node in nodes]}


@app.get("/api/sessions/{session_id}/settings")
def get_settings(session_id: str):
    """Get display settings."""
    return get_session(session_id).get_settings().to_dict()


@app.put("/api/sessions/{session_id}/settings")
def save_settings(session_id: str, request: SettingsRequest):
    """Update display settings."""
    settings = get_session(session_id).update_settings(
        word_wrap_enabled=request.word_wrap_enabled,
        word_wrap_length=request.word_wrap_length,
    )
    return settings.to_dict()


@app.post("/api/sessions/{session_id}/reset")
def reset_session(session_id: str):
    """Return the player to the starting room."""
    location = get_session(session_id).reset()
    return {"location": location.key}


@app.delete("/api/sessions/{session_id}")
def delete_session(session_id: str):
    """End a session."""
    with sessions_lock:
        session = sessions.pop(session_id, None)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")

    return {"status": "deleted"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=True,
    )
