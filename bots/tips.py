"""HTTP endpoint through which the payment watcher reports incoming tips.

``POST /tips`` with a JSON body::

    {"channel_id": "123", "recipient": "0xbot", "sender": "0xabc", "amount": "500000000000000"}

``amount`` is in smallest token units. When a secret is configured the caller
must send it in the ``X-Tip-Secret`` header.
"""

from __future__ import annotations

import hmac
import logging

from aiohttp import web

from giveaway_engine import GiveawayError, TipEvent, parse_token_units

from .giveaway import GiveawayFeature

log = logging.getLogger("giveaway-bot")

SECRET_HEADER = "X-Tip-Secret"
FEATURE_KEY = web.AppKey("feature", GiveawayFeature)
SECRET_KEY = web.AppKey("secret", str)


def _parse_tip(payload: object) -> TipEvent:
    if not isinstance(payload, dict):
        raise ValueError("body must be a JSON object")
    try:
        channel_id = str(payload["channel_id"]).strip()
        recipient = str(payload["recipient"]).strip()
        sender = str(payload["sender"]).strip()
        raw_amount = payload["amount"]
    except KeyError as exc:
        raise ValueError(f"missing field {exc.args[0]}") from exc
    if not (channel_id and recipient and sender):
        raise ValueError("channel_id, recipient and sender are required")
    return TipEvent(
        channel_id=channel_id,
        recipient_address=recipient,
        sender_address=sender,
        token_amount=parse_token_units(raw_amount),
    )


async def receive_tip(request: web.Request) -> web.Response:
    secret = request.app[SECRET_KEY]
    if secret and not hmac.compare_digest(request.headers.get(SECRET_HEADER, ""), secret):
        return web.json_response({"ok": False, "reason": "unauthorized"}, status=401)
    try:
        payload = await request.json()
    except ValueError:
        return web.json_response({"ok": False, "reason": "bad json"}, status=400)
    try:
        event = _parse_tip(payload)
    except GiveawayError as exc:
        return web.json_response({"ok": False, "reason": exc.user_message}, status=400)
    except ValueError as exc:
        return web.json_response({"ok": False, "reason": str(exc)}, status=400)

    outcome = await request.app[FEATURE_KEY].handle_tip(event)
    if outcome is None:
        return web.json_response({"ok": True, "ignored": True})
    log.info(
        "Tip of %s units from %s in %s: %s (%s entries)",
        event.token_amount,
        event.sender_address,
        event.channel_id,
        outcome.result.value,
        outcome.granted,
    )
    return web.json_response({"ok": True, "result": outcome.result.value, "granted": outcome.granted})


def create_tip_app(feature: GiveawayFeature, secret: str | None = None) -> web.Application:
    app = web.Application()
    app[FEATURE_KEY] = feature
    app[SECRET_KEY] = secret or ""
    app.router.add_post("/tips", receive_tip)
    return app


async def start_tip_webhook(app: web.Application, host: str, port: int) -> web.AppRunner:
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host=host, port=port)
    await site.start()
    log.info("Tip webhook listening on %s:%s", host, port)
    return runner


__all__ = ["create_tip_app", "start_tip_webhook", "receive_tip", "SECRET_HEADER"]
