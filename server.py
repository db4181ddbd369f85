# server.py
"""
Main entry point for the SlackMUD server.
Opens the database, bootstraps the schema, promotes configured wizards and
serves the Slack webhooks.
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from config import settings
from slackmud.database import db_manager
from slackmud.player import PlayerRepository
from slackmud.room import RoomGraph
from slackmud.equipment import EquipmentManager
from slackmud.commands.handler import CommandRouter
from slackmud.signature import SignatureVerifier
from slackmud.slack.client import SlackClient, ResponseComposer
from slackmud.routers import slack as slack_routes

# --- Logging Setup ---
log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
log_handlers = [
    logging.FileHandler("server.log"),
    logging.StreamHandler()
]
logging.basicConfig(
    level=logging.INFO,
    format=log_format,
    handlers=log_handlers
)
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("Starting SlackMUD server...")

    # 1. Connect to the database and make sure the schema exists
    await db_manager.connect(settings.dsn())
    await db_manager.init_db()

    # 2. Wizards: promote existing players now, new ones are created at wizard level
    players = PlayerRepository(db_manager)
    wizards = settings.wizard_ids()
    if wizards:
        log.info("Loaded %d wizard(s) from configuration.", len(wizards))
        await players.promote_to_wizard(wizards)
    else:
        log.info("No wizards configured.")

    # 3. Wire the request pipeline
    slack_client = SlackClient(settings.slack_bot_token)
    app.state.verifier = SignatureVerifier(settings.slack_signing_secret)
    app.state.command_router = CommandRouter(
        db_manager, players, RoomGraph(db_manager), EquipmentManager(db_manager), wizards=wizards
    )
    app.state.composer = ResponseComposer(slack_client)
    log.info("Server ready.")

    try:
        yield
    finally:
        log.info("Shutting down server...")
        await slack_client.close()
        await db_manager.close()
        log.info("Server shutdown complete.")


app = FastAPI(title="SlackMUD", description="A multiplayer text adventure played through Slack", lifespan=lifespan)


@app.get("/health", response_class=PlainTextResponse)
async def health():
    return "OK"


app.include_router(slack_routes.router)


if __name__ == "__main__":
    try:
        uvicorn.run(app, host=settings.host, port=settings.port)
    except KeyboardInterrupt:
        log.info("Server stopped manually.")
