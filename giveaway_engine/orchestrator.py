"""Façade the channel gateway calls for every command and event."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal

from . import ledger, lottery
from .currency import Number, PricingContext, token_to_fiat, validate_cap
from .errors import InvalidAmount, NotAuthorized
from .models import (
    DrawResult,
    Giveaway,
    GiveawayStatus,
    ReactionOutcome,
    ReactionResult,
    TipOutcome,
    TipResult,
    utc_now,
)
from .registry import GiveawayRegistry
from .validation import parse_duration, validate_prize

log = logging.getLogger("giveaway-engine")

AdminCheck = Callable[[str, str | None], bool]
Clock = Callable[[], datetime]

DEFAULT_TOP_N = 5


def _deny_all(_actor_id: str, _space_id: str | None) -> bool:
    return False


class GiveawayOrchestrator:
    def __init__(
        self,
        pricing: PricingContext | None = None,
        registry: GiveawayRegistry | None = None,
        *,
        is_admin: AdminCheck = _deny_all,
        clock: Clock = utc_now,
        rng: random.Random | None = None,
    ) -> None:
        self.pricing = pricing or PricingContext()
        self.registry = registry or GiveawayRegistry()
        self._is_admin = is_admin
        self._clock = clock
        self._rng = rng

    def _authorize(self, actor_id: str, space_id: str | None) -> None:
        if not self._is_admin(actor_id, space_id):
            log.warning("Rejected admin operation from %s in %s", actor_id, space_id)
            raise NotAuthorized()

    # ----- Lifecycle -----
    def create(
        self,
        channel_id: str,
        prize: str,
        duration: str,
        *,
        actor_id: str,
        space_id: str | None = None,
        fee: Number | None = None,
        cap: int | None = None,
    ) -> Giveaway:
        self._authorize(actor_id, space_id)
        length = parse_duration(duration)
        prize = validate_prize(prize)
        tip_entry_cap = self.pricing.default_cap if cap is None else validate_cap(cap)
        with self.registry.lock:
            tip_entry_fee = self.pricing.fee_in_tokens(fee)
            start = self._clock()
            giveaway = Giveaway(
                channel_id=channel_id,
                prize=prize,
                start_time=start,
                end_time=start + length,
                tip_entry_fee=tip_entry_fee,
                tip_entry_cap=tip_entry_cap,
                created_by=actor_id,
            )
            return self.registry.create(giveaway)

    def attach_announcement(self, channel_id: str, message_id: str) -> None:
        with self.registry.lock:
            giveaway = self.registry.require(channel_id)
            giveaway.announcement_id = message_id

    def end(self, channel_id: str, *, actor_id: str, space_id: str | None = None) -> DrawResult:
        self._authorize(actor_id, space_id)
        with self.registry.lock:
            giveaway = self.registry.expire(channel_id)
            try:
                winner = lottery.select_winner(giveaway, self._rng)
                result = DrawResult(
                    channel_id=channel_id,
                    prize=giveaway.prize,
                    winner=winner,
                    winner_entries=ledger.total_entries(giveaway, winner) if winner else 0,
                    total_entries=ledger.grand_total(giveaway),
                    participant_count=len(ledger.participants(giveaway)),
                )
            finally:
                # the channel is freed even when the draw fails
                self.registry.remove(channel_id)
        log.info(
            "Giveaway in %s ended by %s: winner=%s entries=%s/%s",
            channel_id,
            actor_id,
            winner,
            result.winner_entries,
            result.total_entries,
        )
        return result

    def sweep(self) -> list[str]:
        return self.registry.sweep(self._clock())

    # ----- Entries -----
    def _accepting(self, channel_id: str) -> Giveaway | None:
        giveaway = self.registry.get(channel_id)
        if giveaway is None or not giveaway.is_active:
            return None
        if not self.registry.ensure_not_expired(giveaway, self._clock()):
            return None
        return giveaway

    def record_reaction(self, channel_id: str, participant: str, message_id: str) -> ReactionOutcome:
        with self.registry.lock:
            giveaway = self._accepting(channel_id)
            if giveaway is None:
                return ReactionOutcome(ReactionResult.INACTIVE)
            if giveaway.announcement_id is None or message_id != giveaway.announcement_id:
                return ReactionOutcome(ReactionResult.WRONG_MESSAGE)
            if participant in giveaway.reaction_entries:
                return ReactionOutcome(
                    ReactionResult.DUPLICATE, ledger.total_entries(giveaway, participant)
                )
            ledger.credit_reaction(giveaway, participant)
            return ReactionOutcome(
                ReactionResult.CREDITED, ledger.total_entries(giveaway, participant)
            )

    def record_tip(self, channel_id: str, participant: str, token_amount: int) -> TipOutcome:
        if isinstance(token_amount, bool) or not isinstance(token_amount, int) or token_amount <= 0:
            raise InvalidAmount("Tip amount must be a positive number of token units.")
        with self.registry.lock:
            giveaway = self._accepting(channel_id)
            if giveaway is None:
                return TipOutcome(0, TipResult.INACTIVE)
            granted = ledger.credit_tip(giveaway, participant, token_amount)
            if granted:
                result = TipResult.GRANTED
            elif token_amount < giveaway.tip_entry_fee:
                result = TipResult.TOO_SMALL
            else:
                result = TipResult.CAP_REACHED
            return TipOutcome(
                granted=granted,
                result=result,
                tip_entries=giveaway.tip_entries.get(participant, 0),
                total_entries=ledger.total_entries(giveaway, participant),
                remaining_cap=ledger.remaining_cap(giveaway, participant),
            )

    # ----- Read-only -----
    def get(self, channel_id: str) -> Giveaway | None:
        return self.registry.get(channel_id)

    def status(self, channel_id: str, top_n: int = DEFAULT_TOP_N) -> GiveawayStatus:
        with self.registry.lock:
            giveaway = self.registry.require(channel_id)
            fee_fiat = self.fee_in_fiat(giveaway)
            top = ledger.standings(giveaway, top_n)
            chances = lottery.win_probabilities(giveaway)
            return GiveawayStatus(
                channel_id=giveaway.channel_id,
                prize=giveaway.prize,
                start_time=giveaway.start_time,
                end_time=giveaway.end_time,
                tip_entry_fee=giveaway.tip_entry_fee,
                tip_entry_cap=giveaway.tip_entry_cap,
                reaction_entries=dict(giveaway.reaction_entries),
                tip_entries=dict(giveaway.tip_entries),
                is_active=giveaway.is_active,
                announcement_id=giveaway.announcement_id,
                state=giveaway.state,
                total_entries=ledger.grand_total(giveaway),
                participant_count=len(ledger.participants(giveaway)),
                tip_entry_fee_fiat=fee_fiat,
                cap_amount_fiat=fee_fiat * giveaway.tip_entry_cap,
                top=top,
                win_chances={s.participant: chances.get(s.participant, 0.0) for s in top},
            )

    def fee_in_fiat(self, giveaway: Giveaway) -> Decimal:
        return token_to_fiat(giveaway.tip_entry_fee, self.pricing.rate)

    def now(self) -> datetime:
        return self._clock()

    # ----- Admin setters -----
    def set_fee(
        self, channel_id: str, fee: Number, *, actor_id: str, space_id: str | None = None
    ) -> Giveaway:
        self._authorize(actor_id, space_id)
        with self.registry.lock:
            giveaway = self.registry.require(channel_id)
            giveaway.tip_entry_fee = self.pricing.fee_in_tokens(fee)
        log.info("Tip entry fee in %s set to %s units by %s", channel_id, giveaway.tip_entry_fee, actor_id)
        return giveaway

    def set_cap(
        self, channel_id: str, cap: int | str, *, actor_id: str, space_id: str | None = None
    ) -> Giveaway:
        self._authorize(actor_id, space_id)
        value = validate_cap(cap)
        with self.registry.lock:
            giveaway = self.registry.require(channel_id)
            held = max(giveaway.tip_entries.values(), default=0)
            if value < held:
                raise InvalidAmount(
                    f"Cap cannot be lower than the {held} tip entries a participant already holds."
                )
            giveaway.tip_entry_cap = value
        log.info("Tip entry cap in %s set to %s by %s", channel_id, value, actor_id)
        return giveaway

    def set_rate(self, rate: Number, *, actor_id: str, space_id: str | None = None) -> Decimal:
        self._authorize(actor_id, space_id)
        with self.registry.lock:
            return self.pricing.set_rate(rate)

    def set_default_fee(self, fee: Number, *, actor_id: str, space_id: str | None = None) -> Decimal:
        self._authorize(actor_id, space_id)
        with self.registry.lock:
            return self.pricing.set_default_fee(fee)


__all__ = ["GiveawayOrchestrator", "AdminCheck", "Clock", "DEFAULT_TOP_N"]
