"""
Bid repository

Bids are never deleted; status changes go through `update`.
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from freelance_market.bid.models import Bid
from freelance_market.kernel.database import SQLiteDatabase, no_transaction, to_db_row
from freelance_market.kernel.errors import BidNotFound
from freelance_market.kernel.time import TimeProvider, default_time_provider

BID_COLUMNS = (
    "bid_id",
    "project_id",
    "freelancer_id",
    "proposed_rate",
    "estimated_duration_days",
    "cover_letter",
    "status",
    "created_at",
    "updated_at",
)


class BidRepository(Protocol):
    """Persistence contract for Bid records"""

    async def find_by_id(self, bid_id: str) -> Bid | None: ...

    async def find_by_project_id(self, project_id: str) -> list[Bid]: ...

    async def find_by_freelancer_id(self, freelancer_id: str) -> list[Bid]: ...

    async def create(self, bid: Bid) -> Bid: ...

    async def update(self, bid_id: str, changes: dict[str, Any]) -> Bid: ...

    def transaction(self) -> AbstractAsyncContextManager[None]: ...


def _apply_changes(bid: Bid, changes: dict[str, Any], time_provider: TimeProvider) -> Bid:
    merged = {**bid.model_dump(), **changes, "updated_at": time_provider.now()}
    merged["bid_id"] = bid.bid_id
    return Bid.model_validate(merged)


class InMemoryBidRepository:
    """
    Dict-backed bid store

    Listings come back in submission order (created_at, then id).
    """

    def __init__(self, time_provider: TimeProvider | None = None) -> None:
        self.time_provider = time_provider or default_time_provider
        self.bids: dict[str, Bid] = {}

    async def find_by_id(self, bid_id: str) -> Bid | None:
        bid = self.bids.get(bid_id)
        return bid.model_copy(deep=True) if bid else None

    async def find_by_project_id(self, project_id: str) -> list[Bid]:
        return self._select(lambda b: b.project_id == project_id)

    async def find_by_freelancer_id(self, freelancer_id: str) -> list[Bid]:
        return self._select(lambda b: b.freelancer_id == freelancer_id)

    async def create(self, bid: Bid) -> Bid:
        self.bids[bid.bid_id] = bid.model_copy(deep=True)
        return bid.model_copy(deep=True)

    async def update(self, bid_id: str, changes: dict[str, Any]) -> Bid:
        current = self.bids.get(bid_id)
        if current is None:
            raise BidNotFound(bid_id)
        updated = _apply_changes(current, changes, self.time_provider)
        self.bids[bid_id] = updated
        return updated.model_copy(deep=True)

    def transaction(self) -> AbstractAsyncContextManager[None]:
        return no_transaction()

    def _select(self, predicate: Any) -> list[Bid]:
        matches = [b.model_copy(deep=True) for b in self.bids.values() if predicate(b)]
        return sorted(matches, key=lambda b: (b.created_at, b.bid_id))


class SQLiteBidRepository:
    """Bid store on the shared SQLite database"""

    def __init__(self, db: SQLiteDatabase, time_provider: TimeProvider | None = None) -> None:
        self.db = db
        self.time_provider = time_provider or default_time_provider

    async def find_by_id(self, bid_id: str) -> Bid | None:
        with self.db.connect() as conn:
            row = conn.execute("SELECT * FROM bids WHERE bid_id = ?", (bid_id,)).fetchone()
        return Bid.model_validate(dict(row)) if row else None

    async def find_by_project_id(self, project_id: str) -> list[Bid]:
        return self._select("project_id = ?", (project_id,))

    async def find_by_freelancer_id(self, freelancer_id: str) -> list[Bid]:
        return self._select("freelancer_id = ?", (freelancer_id,))

    async def create(self, bid: Bid) -> Bid:
        columns = ", ".join(BID_COLUMNS)
        placeholders = ", ".join(f":{c}" for c in BID_COLUMNS)
        with self.db.connect() as conn:
            conn.execute(
                f"INSERT INTO bids ({columns}) VALUES ({placeholders})",
                to_db_row(bid.model_dump()),
            )
        return bid

    async def update(self, bid_id: str, changes: dict[str, Any]) -> Bid:
        current = await self.find_by_id(bid_id)
        if current is None:
            raise BidNotFound(bid_id)
        updated = _apply_changes(current, changes, self.time_provider)

        assignments = ", ".join(f"{c} = :{c}" for c in BID_COLUMNS if c != "bid_id")
        with self.db.connect() as conn:
            conn.execute(
                f"UPDATE bids SET {assignments} WHERE bid_id = :bid_id",
                to_db_row(updated.model_dump()),
            )
        return updated

    def transaction(self) -> AbstractAsyncContextManager[None]:
        return self.db.transaction()

    def _select(self, where: str, params: tuple[Any, ...]) -> list[Bid]:
        with self.db.connect() as conn:
            rows = conn.execute(
                f"SELECT * FROM bids WHERE {where} ORDER BY created_at, bid_id",
                params,
            ).fetchall()
        return [Bid.model_validate(dict(row)) for row in rows]
