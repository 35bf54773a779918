from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from datetime import datetime

from .errors import AlreadyActive, NoActiveGiveaway
from .models import Giveaway

log = logging.getLogger("giveaway-engine")


class GiveawayRegistry:
    """Holds at most one giveaway per channel.

    A record is Active while ``is_active`` is set and Expired once it is
    cleared; Expired records stay until ``remove`` so they can still be drawn.
    All access from the orchestrator happens under ``lock``.
    """

    def __init__(self) -> None:
        self._giveaways: dict[str, Giveaway] = {}
        self.lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._giveaways)

    def __contains__(self, channel_id: object) -> bool:
        return channel_id in self._giveaways

    def __iter__(self) -> Iterator[Giveaway]:
        return iter(list(self._giveaways.values()))

    def channels(self) -> list[str]:
        return list(self._giveaways)

    def get(self, channel_id: str) -> Giveaway | None:
        return self._giveaways.get(channel_id)

    def require(self, channel_id: str) -> Giveaway:
        giveaway = self._giveaways.get(channel_id)
        if giveaway is None:
            raise NoActiveGiveaway()
        return giveaway

    def create(self, giveaway: Giveaway) -> Giveaway:
        with self.lock:
            if giveaway.channel_id in self._giveaways:
                raise AlreadyActive()
            self._giveaways[giveaway.channel_id] = giveaway
        log.info(
            "Giveaway created in %s for %r, ends %s",
            giveaway.channel_id,
            giveaway.prize,
            giveaway.end_time.isoformat(),
        )
        return giveaway

    def remove(self, channel_id: str) -> Giveaway:
        with self.lock:
            try:
                giveaway = self._giveaways.pop(channel_id)
            except KeyError as exc:
                raise NoActiveGiveaway() from exc
        log.info("Giveaway removed from %s", channel_id)
        return giveaway

    def ensure_not_expired(self, giveaway: Giveaway, now: datetime) -> bool:
        """Deactivate ``giveaway`` once ``now`` is past its end time.

        Returns True while the giveaway still accepts entries. This is the one
        expiry check shared by the sweep and the entry-recording paths.
        """
        with self.lock:
            if giveaway.is_active and giveaway.is_expired(now):
                giveaway.is_active = False
                log.info("Giveaway in %s expired at %s", giveaway.channel_id, giveaway.end_time.isoformat())
            return giveaway.is_active

    def expire(self, channel_id: str) -> Giveaway:
        with self.lock:
            giveaway = self.require(channel_id)
            giveaway.is_active = False
            return giveaway

    def sweep(self, now: datetime) -> list[str]:
        """Expire every giveaway past its end time; return the channels flipped."""
        expired: list[str] = []
        with self.lock:
            for channel_id, giveaway in list(self._giveaways.items()):
                was_active = giveaway.is_active
                if was_active and not self.ensure_not_expired(giveaway, now):
                    expired.append(channel_id)
        if expired:
            log.info("Sweep expired %s giveaway(s): %s", len(expired), ", ".join(expired))
        return expired


__all__ = ["GiveawayRegistry"]
