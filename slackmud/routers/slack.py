# slackmud/routers/slack.py
"""
Webhook endpoints Slack calls: slash commands and the Events API.
Every request is signature-checked before its body is parsed.
"""
import logging

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request
from pydantic import ValidationError

from ..commands.context import Caller, Source
from ..errors import Unauthorized
from ..signature import SIGNATURE_HEADER, TIMESTAMP_HEADER
from ..slack.types import EventEnvelope, MessageEvent, SlashCommand

log = logging.getLogger(__name__)

router = APIRouter(prefix="/slack", tags=["slack"])


async def _verified_body(request: Request) -> bytes:
    body = await request.body()
    try:
        request.app.state.verifier.verify(
            body,
            request.headers.get(TIMESTAMP_HEADER),
            request.headers.get(SIGNATURE_HEADER),
        )
    except Unauthorized as e:
        log.warning("Rejected %s from %s: %s", request.url.path,
                    request.client.host if request.client else "unknown", e)
        raise HTTPException(status_code=401, detail="Invalid request signature")
    return body


@router.post("/commands")
async def slash_command(request: Request, background_tasks: BackgroundTasks):
    """
    Runs a /mud command. The private text comes back as the ephemeral reply;
    public notices are posted after the response is sent.
    """
    await _verified_body(request)
    form = await request.form()
    try:
        command = SlashCommand(**{k: v for k, v in form.items() if isinstance(v, str)})
    except ValidationError:
        raise HTTPException(status_code=400, detail="Malformed slash command")

    caller = Caller(
        user_id=command.user_id,
        user_name=command.user_name or command.user_id,
        source=Source.SLASH,
        channel_id=command.channel_id,
        channel_name=command.channel_name or command.channel_id,
    )
    state = request.app.state
    response = await state.command_router.handle_text(command.text, caller)
    background_tasks.add_task(state.composer.deliver, response, command.user_id, include_private=False)
    return {"response_type": "ephemeral", "text": response.private_text or ""}


async def _run_direct_message(state, event: MessageEvent):
    user_name = await state.composer.client.get_user_real_name(event.user)
    caller = Caller(user_id=event.user, user_name=user_name, source=Source.DM, channel_id=event.channel)
    response = await state.command_router.handle_text(event.text, caller)
    await state.composer.deliver(response, event.user)


@router.post("/events")
async def events(request: Request, background_tasks: BackgroundTasks):
    """Answers the url_verification handshake and runs DMs sent to the bot."""
    body = await _verified_body(request)
    try:
        envelope = EventEnvelope.model_validate_json(body)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Malformed event")

    if envelope.type == "url_verification":
        log.info("Received URL verification challenge.")
        return {"challenge": envelope.challenge}

    event = envelope.event
    if envelope.type != "event_callback" or event is None or not event.is_command:
        log.debug("Ignoring event %s.", envelope.event_id)
        return {"ok": True}

    log.info("Received DM from %s: %s", event.user, event.text)
    background_tasks.add_task(_run_direct_message, request.app.state, event)
    return {"ok": True}
