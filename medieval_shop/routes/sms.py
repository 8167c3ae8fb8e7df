"""Hint requests and the inbound SMS webhook."""

import logging
from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, Header, Request, Response

from medieval_shop import storage
from medieval_shop.errors import UpstreamUnavailable
from medieval_shop.pipeline import Notifier, handle_inbound
from medieval_shop.sms import twiml_reply

from .deps import get_notifier
from .models import RequestHintsBody

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/request-hints")
async def request_hints(
    body: RequestHintsBody,
    x_visitor_id: str = Header(default="anonymous"),
    notifier: Notifier = Depends(get_notifier),
):
    """Text the visitor some tips. Registers the phone number when given."""
    try:
        if body.phone_number and body.phone_number.strip():
            profile = storage.register_phone(x_visitor_id, body.phone_number)
        else:
            profile = storage.get_profile(x_visitor_id)
    except UpstreamUnavailable as e:
        logger.error("hint request failed: %s", e)
        return {"success": False}
    if profile is None:
        return {"success": False}
    return {"success": await notifier.hints(profile)}


@router.post("/sms")
async def inbound_sms(request: Request):
    """Webhook for inbound text messages. Always answers with TwiML."""
    raw = (await request.body()).decode("utf-8", errors="replace")
    form = parse_qs(raw)
    sender = form.get("From", [""])[0]
    text = form.get("Body", [""])[0]
    try:
        reply = handle_inbound(sender, text)
    except Exception:
        logger.exception("inbound sms handling failed")
        reply = "The scribe hath dropped his quill. Pray send thy message again."
    return Response(content=twiml_reply(reply), media_type="application/xml")
