from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect

from snapshot import serialize_snapshot
from trivia.exceptions import GameNotFoundError, InvalidSetupError
from trivia.player import Player
from trivia.settings import get_settings

from .registry import GameRegistry
from .runner import GameRunner
from .schemas import (
    CommandRequest,
    CommandResponse,
    CreateGameRequest,
    CreateGameResponse,
    GameEventDTO,
    GameStatus,
)

logger = logging.getLogger(__name__)

HEARTBEAT_SECONDS = 5


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown."""
    get_settings().configure_logging()
    logger.info("Starting trivia server")

    yield

    logger.info("Shutting down, stopping %d games", len(registry))
    await registry.stop_all()


app = FastAPI(
    title="Literature Trivia Server",
    version="0.1.0",
    lifespan=lifespan,
)
registry = GameRegistry()


async def _runner(game_id: str) -> GameRunner:
    try:
        return await registry.get(game_id)
    except GameNotFoundError:
        raise HTTPException(status_code=404, detail="Game not found")


@app.post("/games", response_model=CreateGameResponse)
async def create_game(req: CreateGameRequest):
    players = [Player(i, p.name, color=p.color, icon=p.icon) for i, p in enumerate(req.players)]
    try:
        gid = await registry.create_game(
            players=players,
            mode=req.mode,
            max_turns=req.max_turns,
            seed=req.seed,
        )
    except InvalidSetupError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return CreateGameResponse(game_id=gid)


@app.get("/games/{game_id}/snapshot")
async def get_snapshot(game_id: str):
    runner = await _runner(game_id)
    return serialize_snapshot(runner.game)


@app.get("/games/{game_id}/status", response_model=GameStatus)
async def get_status(game_id: str):
    runner = await _runner(game_id)
    return GameStatus(**await runner.status())


@app.get("/games/{game_id}/events", response_model=list[GameEventDTO])
async def get_events(game_id: str, since: int = -1):
    runner = await _runner(game_id)
    return [GameEventDTO(**e) for e in await runner.get_events_since(since)]


@app.post("/games/{game_id}/commands", response_model=CommandResponse)
async def send_command(game_id: str, req: CommandRequest):
    runner = await _runner(game_id)
    ok, reason = await runner.dispatch(
        req.command,
        option_index=req.option_index,
        player_index=req.player_index,
        tile_delta=req.tile_delta,
    )
    return CommandResponse(accepted=ok, reason=None if ok else reason)


@app.delete("/games/{game_id}")
async def delete_game(game_id: str):
    try:
        await registry.stop(game_id)
    except GameNotFoundError:
        raise HTTPException(status_code=404, detail="Game not found")
    return {"game_id": game_id, "stopped": True}


@app.websocket("/ws/games/{game_id}")
async def ws_game(websocket: WebSocket, game_id: str):
    await websocket.accept()
    try:
        runner = await registry.get(game_id)
    except GameNotFoundError:
        await websocket.close(code=4404)
        return

    queue = await runner.subscribe()

    async def sender():
        while True:
            msg = await queue.get()
            await websocket.send_json(msg)

    async def heartbeat():
        while True:
            await asyncio.sleep(HEARTBEAT_SECONDS)
            await websocket.send_json({"type": "heartbeat"})

    sender_task = asyncio.create_task(sender())
    hb_task = asyncio.create_task(heartbeat())
    try:
        # Inputs are ignored; commands go through the HTTP endpoint.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        await runner.unsubscribe(queue)
        sender_task.cancel()
        hb_task.cancel()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("server.app:app", host=settings.host, port=settings.port)
