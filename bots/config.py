"""Environment configuration for the giveaway bot."""

from __future__ import annotations

import decimal
import os
from dataclasses import dataclass
from decimal import Decimal

from giveaway_engine.currency import DEFAULT_RATE, DEFAULT_TIP_CAP, DEFAULT_TIP_FEE, MAX_TIP_CAP

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

DEFAULT_ENTRY_EMOJI = "\U0001f381"


def env_bool(name: str, *, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


def env_int(name: str, *, default: int | None = None) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_decimal(name: str, *, default: Decimal) -> Decimal:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = Decimal(raw.strip())
    except decimal.InvalidOperation:
        return default
    if not value.is_finite() or value <= 0:
        return default
    return value


@dataclass(frozen=True)
class ShadowConfig:
    enabled: bool
    channel_id: int | None


def read_shadow_config(*, default_enabled: bool = False) -> ShadowConfig:
    return ShadowConfig(
        enabled=env_bool("SHADOW_MODE", default=default_enabled),
        channel_id=env_int("SHADOW_CHANNEL_ID"),
    )


@dataclass(frozen=True)
class GiveawaySettings:
    token_price: Decimal
    default_tip_fee: Decimal
    default_tip_cap: int
    sweep_interval_seconds: int
    entry_emoji: str
    status_top_n: int


def read_giveaway_settings() -> GiveawaySettings:
    cap = env_int("DEFAULT_TIP_CAP", default=DEFAULT_TIP_CAP)
    interval = env_int("SWEEP_INTERVAL_SECONDS", default=60)
    top_n = env_int("STATUS_TOP_N", default=5)
    return GiveawaySettings(
        token_price=env_decimal("TOKEN_PRICE", default=DEFAULT_RATE),
        default_tip_fee=env_decimal("DEFAULT_TIP_FEE", default=DEFAULT_TIP_FEE),
        default_tip_cap=cap if cap and 0 < cap <= MAX_TIP_CAP else DEFAULT_TIP_CAP,
        sweep_interval_seconds=interval if interval and interval > 0 else 60,
        entry_emoji=os.getenv("ENTRY_EMOJI") or DEFAULT_ENTRY_EMOJI,
        status_top_n=top_n if top_n and top_n > 0 else 5,
    )


@dataclass(frozen=True)
class TipWebhookConfig:
    enabled: bool
    host: str
    port: int
    secret: str | None


def read_tip_webhook_config() -> TipWebhookConfig:
    return TipWebhookConfig(
        enabled=env_bool("TIP_WEBHOOK_ENABLED", default=False),
        host=os.getenv("TIP_WEBHOOK_HOST") or "0.0.0.0",
        port=env_int("TIP_WEBHOOK_PORT", default=8080) or 8080,
        secret=os.getenv("TIP_WEBHOOK_SECRET") or None,
    )


@dataclass(slots=True)
class EnvironmentConfig:
    discord_token: str
    tip_recipient_address: str
    giveaway: GiveawaySettings
    tip_webhook: TipWebhookConfig
    shadow: ShadowConfig

    @classmethod
    def load(cls) -> "EnvironmentConfig":
        missing: list[str] = []

        def need(name: str) -> str:
            value = os.getenv(name)
            if not value:
                missing.append(name)
                return ""
            return value

        discord_token = need("DISCORD_TOKEN")
        tip_recipient_address = need("TIP_RECIPIENT_ADDRESS")

        if missing:
            raise RuntimeError("Missing env vars: " + ", ".join(sorted(set(missing))))

        return cls(
            discord_token=discord_token,
            tip_recipient_address=tip_recipient_address,
            giveaway=read_giveaway_settings(),
            tip_webhook=read_tip_webhook_config(),
            shadow=read_shadow_config(default_enabled=False),
        )
