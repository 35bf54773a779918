from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from giveaway_engine import Giveaway, GiveawayOrchestrator, GiveawayRegistry, PricingContext

ADMIN_ID = "1001"
GUILD_ID = "500"
START = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def admin_only(actor_id: str, _space_id: str | None) -> bool:
    return actor_id == ADMIN_ID


def make_giveaway(channel_id: str = "chan-1", *, fee: int = 100, cap: int = 10, **kwargs) -> Giveaway:
    return Giveaway(
        channel_id=channel_id,
        prize=kwargs.pop("prize", "100 USDC"),
        start_time=kwargs.pop("start_time", START),
        end_time=kwargs.pop("end_time", START + timedelta(hours=24)),
        tip_entry_fee=fee,
        tip_entry_cap=cap,
        **kwargs,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def orchestrator(clock: FakeClock) -> GiveawayOrchestrator:
    return GiveawayOrchestrator(
        PricingContext(),
        GiveawayRegistry(),
        is_admin=admin_only,
        clock=clock,
    )


@pytest.fixture
def admin() -> dict[str, str]:
    return {"actor_id": ADMIN_ID, "space_id": GUILD_ID}
