"""
Pong Web Server — driver layer (FastAPI + WebSocket)

Serves the canvas frontend, runs the fixed-cadence tick loop and streams a
snapshot of the court to browser clients over WebSocket. Key state from the
clients is turned into directives here; the controller never sees raw keys.
"""

import asyncio
import json
import logging
import os
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from controller import PongController
from logging_config import setup_logging
from phase import Phase
from physics import Directive

log = logging.getLogger("pong.server")

STATIC_DIR = Path(__file__).parent / "static"

# ── Controller ──────────────────────────────────────────────────────────────

ctrl = PongController()


# ── Lifespan (startup/shutdown) ─────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    level = getattr(logging, os.environ.get("PONG_LOG_LEVEL", "INFO").upper(), logging.INFO)
    setup_logging(level)
    task = asyncio.create_task(game_loop())
    log.info("Tick loop started at %d fps", TARGET_FPS)
    yield
    task.cancel()


app = FastAPI(lifespan=lifespan)

# ── Client / input state ────────────────────────────────────────────────────

clients: list[WebSocket] = []
held_keys: dict[str, bool] = {}

# Held keys → directives (A/Z left paddle, L/M right paddle)
KEY_BINDINGS = {
    "a": Directive.LEFT_UP,
    "z": Directive.LEFT_DOWN,
    "l": Directive.RIGHT_UP,
    "m": Directive.RIGHT_DOWN,
}
PAUSE_KEY = "space"
START_KEYS = ("enter", "s")


def directives_from_keys(keys: dict[str, bool]) -> frozenset:
    """Directives for every bound key currently held."""
    return frozenset(d for key, d in KEY_BINDINGS.items() if keys.get(key, False))


# ── Tick loop ───────────────────────────────────────────────────────────────

TARGET_FPS = 60
FRAME_DT = 1.0 / TARGET_FPS


async def game_loop():
    """Call ctrl.tick once per frame and broadcast the result."""
    while True:
        now = time.perf_counter()

        snap = ctrl.tick(directives_from_keys(held_keys))

        if clients:
            frame_msg = _build_frame_message(snap)
            dead: list[WebSocket] = []
            for ws in clients:
                try:
                    await ws.send_text(frame_msg)
                except Exception:
                    dead.append(ws)
            for ws in dead:
                if ws in clients:
                    clients.remove(ws)
                    log.debug("Dropped client after failed send")

        elapsed = time.perf_counter() - now
        sleep_time = FRAME_DT - elapsed
        if sleep_time > 0:
            await asyncio.sleep(sleep_time)
        else:
            await asyncio.sleep(0)


def _build_frame_message(snap=None) -> str:
    """Serialize a snapshot plus drained controller events into a frame message."""
    if snap is None:
        snap = ctrl.snapshot()

    events = list(ctrl.pending_events)
    ctrl.pending_events.clear()

    sounds = []
    for ev in ctrl.physics_events:
        sounds.append({
            "type": ev.get("type", ""),
            "speed": round(float(ev.get("speed", 0.0)), 3),
        })

    frame = {
        "type": "frame",
        "state": snap.to_dict(),
        "events": events,
        "sounds": sounds,
    }
    return json.dumps(frame, separators=(',', ':'))


def _build_init_message() -> str:
    cfg = ctrl.config
    return json.dumps({
        "type": "init",
        "court_width": cfg.court_width,
        "court_height": cfg.court_height,
        "paddle_width": cfg.paddle_width,
        "paddle_height": cfg.paddle_height,
        "ball_size": cfg.ball_size,
        "winning_score": cfg.winning_score,
        "fps": TARGET_FPS,
    })


# ── Key press handlers ──────────────────────────────────────────────────────

def _handle_key_down(key: str):
    """Handle a key press event from the client."""
    held_keys[key] = True

    if key == PAUSE_KEY:
        # Pause only means something during a match that has not ended
        if ctrl.phase in (Phase.PLAYING, Phase.PAUSED):
            ctrl.toggle_pause()
    elif key in START_KEYS:
        if ctrl.phase in (Phase.IDLE, Phase.FINISHED):
            ctrl.start_match()


def _handle_key_up(key: str):
    """Handle a key release event from the client."""
    held_keys[key] = False


# ── WebSocket endpoint ──────────────────────────────────────────────────────

@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await ws.accept()
    clients.append(ws)
    log.info("Client connected (%d total)", len(clients))

    await ws.send_text(_build_init_message())
    await ws.send_text(json.dumps({
        "type": "frame",
        "state": ctrl.snapshot().to_dict(),
        "events": [],
        "sounds": [],
    }))

    try:
        while True:
            data = await ws.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                continue

            cmd = msg.get("cmd", "")
            if cmd == "key_down":
                _handle_key_down(str(msg.get("key", "")).lower())
            elif cmd == "key_up":
                _handle_key_up(str(msg.get("key", "")).lower())
            elif cmd == "start":
                ctrl.start_match()
            elif cmd == "pause":
                ctrl.toggle_pause()
            elif cmd == "get_state":
                await ws.send_text(json.dumps({
                    "type": "state_json",
                    "data": ctrl.get_state_json(),
                }))
    except WebSocketDisconnect:
        pass
    finally:
        if ws in clients:
            clients.remove(ws)
        held_keys.clear()
        log.info("Client disconnected (%d left)", len(clients))


# ── Static files + root route ───────────────────────────────────────────────

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


@app.get("/")
async def root():
    return FileResponse(STATIC_DIR / "index.html")


# ── Run with uvicorn ────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("server:app", host="0.0.0.0", port=8000, reload=False)
