"""Arena control API: state, pause/resume, restart, controls, overrides and the event stream."""

from __future__ import annotations

import asyncio
import queue

from fastapi import APIRouter, HTTPException, Request, WebSocket, WebSocketDisconnect
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from tankarena.config import settings
from tankarena.simulation.cheats import AdminCheats
from tankarena.simulation.maps import list_maps

router = APIRouter(prefix=settings.api_prefix, tags=["arena"])


class RestartRequest(BaseModel):
    map_id: int | None = None
    rounds_to_win: int | None = Field(None, ge=1)


class ControlUpdate(BaseModel):
    pressed: list[str] = Field(default_factory=list)
    released: list[str] = Field(default_factory=list)


class CheatsUpdate(BaseModel):
    enabled: bool = False
    player_id: int = Field(0, ge=0, le=2)
    god_mode: bool = False
    instant_kill: bool = False
    unlimited_bounces: bool = False
    super_speed: bool = False
    rapid_fire: bool = False


def _get_host(request: Request):
    """Retrieve the ArenaHost from app state."""
    host = getattr(request.app.state, "arena_host", None)
    if host is None:
        raise HTTPException(503, "Arena not available")
    return host


@router.get("/state")
async def get_state(request: Request):
    """Current arena snapshot."""
    return _get_host(request).engine.snapshot()


@router.get("/mirror")
async def get_mirror_payload(request: Request):
    """Snapshot subset replicated to a remote peer."""
    return _get_host(request).engine.mirror_payload()


@router.get("/maps")
async def get_maps():
    return list_maps()


@router.post("/pause")
async def pause(request: Request):
    host = _get_host(request)
    if host.state.game_over:
        raise HTTPException(400, "Match is over")
    host.pause()
    return {"status": "paused"}


@router.post("/resume")
async def resume(request: Request):
    _get_host(request).resume()
    return {"status": "running"}


@router.post("/restart")
async def restart(body: RestartRequest, request: Request):
    """Discard the current match and start a new one."""
    state = _get_host(request).restart(body.map_id, body.rounds_to_win)
    return {"status": "restarted", "map_id": state.current_map, "rounds_to_win": state.rounds_to_win}


@router.post("/controls")
async def update_controls(body: ControlUpdate, request: Request):
    """Press and/or release control codes."""
    host = _get_host(request)
    host.release(*body.released)
    host.press(*body.pressed)
    return {"held": sorted(host.held)}


@router.get("/cheats")
async def get_cheats(request: Request):
    return _get_host(request).cheats.to_dict()


@router.put("/cheats")
async def put_cheats(body: CheatsUpdate, request: Request):
    """Install already-authorized admin overrides."""
    host = _get_host(request)
    host.set_cheats(AdminCheats(**body.model_dump()))
    return host.cheats.to_dict()


@router.post("/remote-tank")
async def remote_tank(payload: dict, request: Request):
    """Accept a remote peer's tank state."""
    host = _get_host(request)
    try:
        tank = host.apply_remote_tank(payload)
    except ValidationError as e:
        raise HTTPException(400, f"Invalid tank payload: {e.error_count()} errors")
    except KeyError:
        raise HTTPException(404, "Unknown tank id")
    return tank.to_dict()


def _next_event(q: queue.Queue, timeout: float = 0.5) -> dict | None:
    try:
        return q.get(timeout=timeout)
    except queue.Empty:
        return None


@router.websocket("/events")
async def events_ws(websocket: WebSocket):
    """Relay gameplay events from the host's EventBus to one client."""
    host = getattr(websocket.app.state, "arena_host", None)
    bus = host.event_bus if host is not None else None
    if bus is None:
        await websocket.close(code=1013)
        return

    await websocket.accept()
    sub = bus.subscribe()
    logger.info(f"Event stream connected ({bus.subscriber_count} subscribers)")
    await websocket.send_json({"type": "connected"})

    loop = asyncio.get_running_loop()

    async def relay():
        while True:
            msg = await loop.run_in_executor(None, _next_event, sub)
            if msg is not None:
                await websocket.send_json(msg)

    relay_task = asyncio.create_task(relay())
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        relay_task.cancel()
        bus.unsubscribe(sub)
        logger.info("Event stream disconnected")
