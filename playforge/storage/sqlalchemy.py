"""SQLAlchemy storage backend for PlayForge."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Mapping

from sqlalchemy import JSON, DateTime, Float, Integer, String, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..domain.energy import ensure_utc
from ..domain.levels import LevelDefinition
from .base import (
    ActiveBoost,
    LevelStore,
    PlayerListener,
    PlayerRecord,
    PlayerStore,
    Unsubscribe,
    check_fields,
)
from .notifier import SnapshotNotifier


class Base(DeclarativeBase):
    pass


class PlayerTable(Base):
    __tablename__ = "playforge_users"

    player_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    wallet_address: Mapped[str] = mapped_column(String(128), default="")
    balance: Mapped[int] = mapped_column(Integer, default=0)
    energy: Mapped[int] = mapped_column(Integer, default=100)
    last_energy_update: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    energy_refill_rate_ms: Mapped[int] = mapped_column(Integer, default=60_000)
    assets: Mapped[dict] = mapped_column(JSON, default=dict)
    active_boosts: Mapped[dict] = mapped_column(JSON, default=dict)
    current_level_id: Mapped[int] = mapped_column(Integer, default=1)
    number_of_refs: Mapped[int] = mapped_column(Integer, default=0)
    referral_multiplier: Mapped[float] = mapped_column(Float, default=1.0)
    referred_by: Mapped[str | None] = mapped_column(String(64), nullable=True)


class LevelTable(Base):
    __tablename__ = "playforge_levels"

    level_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), default="")
    reward: Mapped[int] = mapped_column(Integer, default=0)
    energy_cost: Mapped[int] = mapped_column(Integer, default=0)
    details: Mapped[dict] = mapped_column("metadata", JSON, default=dict)


class AsyncSQLAlchemyStorage:
    """Bundle of async stores backed by SQLAlchemy."""

    def __init__(self, dsn: str, *, echo: bool = False) -> None:
        self._engine = create_async_engine(dsn, echo=echo, future=True)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)
        self._notifier = SnapshotNotifier()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            yield session

    async def init_models(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()

    def player_store(self) -> "AsyncSQLAlchemyPlayerStore":
        return AsyncSQLAlchemyPlayerStore(self._session_factory, notifier=self._notifier)

    def level_store(self) -> "AsyncSQLAlchemyLevelStore":
        return AsyncSQLAlchemyLevelStore(self._session_factory)


def _dump_boosts(boosts: Mapping[str, ActiveBoost]) -> dict[str, str]:
    return {kind: ensure_utc(boost.expires_at).isoformat() for kind, boost in boosts.items()}


def _load_boosts(raw: Mapping[str, str] | None) -> dict[str, ActiveBoost]:
    return {
        kind: ActiveBoost(expires_at=ensure_utc(datetime.fromisoformat(value)))
        for kind, value in (raw or {}).items()
    }


def _to_columns(values: Mapping[str, Any]) -> dict[str, Any]:
    columns = dict(values)
    if "active_boosts" in columns:
        columns["active_boosts"] = _dump_boosts(columns["active_boosts"])
    if "assets" in columns:
        columns["assets"] = dict(columns["assets"])
    if "referral_multiplier" in columns:
        columns["referral_multiplier"] = float(columns["referral_multiplier"])
    return columns


class AsyncSQLAlchemyPlayerStore(PlayerStore):
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        notifier: SnapshotNotifier | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._notifier = notifier or SnapshotNotifier()

    async def fetch(self, player_id: str) -> PlayerRecord | None:
        async with self._session_factory() as session:
            row = await session.get(PlayerTable, player_id)
            if not row:
                return None
            return PlayerRecord(
                player_id=row.player_id,
                wallet_address=row.wallet_address or "",
                balance=row.balance,
                energy=row.energy,
                last_energy_update=ensure_utc(row.last_energy_update),
                energy_refill_rate_ms=row.energy_refill_rate_ms,
                assets=dict(row.assets or {}),
                active_boosts=_load_boosts(row.active_boosts),
                current_level_id=row.current_level_id,
                number_of_refs=row.number_of_refs,
                referral_multiplier=row.referral_multiplier,
                referred_by=row.referred_by,
            )

    async def persist(self, record: PlayerRecord) -> None:
        values = _to_columns(
            {
                "wallet_address": record.wallet_address,
                "balance": record.balance,
                "energy": record.energy,
                "last_energy_update": record.last_energy_update,
                "energy_refill_rate_ms": record.energy_refill_rate_ms,
                "assets": record.assets,
                "active_boosts": record.active_boosts,
                "current_level_id": record.current_level_id,
                "number_of_refs": record.number_of_refs,
                "referral_multiplier": record.referral_multiplier,
                "referred_by": record.referred_by,
            }
        )
        async with self._session_factory() as session:
            stmt = update(PlayerTable).where(PlayerTable.player_id == record.player_id).values(**values)
            result = await session.execute(stmt)
            if result.rowcount == 0:
                session.add(PlayerTable(player_id=record.player_id, **values))
            await session.commit()
        await self._notify(record.player_id)

    async def update(self, player_id: str, values: Mapping[str, Any]) -> None:
        check_fields(values)
        async with self._session_factory() as session:
            stmt = update(PlayerTable).where(PlayerTable.player_id == player_id).values(**_to_columns(values))
            result = await session.execute(stmt)
            if result.rowcount == 0:
                await session.rollback()
                raise KeyError(f"Player {player_id} not found")
            await session.commit()
        await self._notify(player_id)

    def subscribe(self, player_id: str, listener: PlayerListener) -> Unsubscribe:
        return self._notifier.subscribe(player_id, listener)

    async def _notify(self, player_id: str) -> None:
        if not self._notifier.has_listeners(player_id):
            return
        record = await self.fetch(player_id)
        if record is not None:
            await self._notifier.publish(record)


class AsyncSQLAlchemyLevelStore(LevelStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def fetch_level(self, level_id: int) -> LevelDefinition | None:
        async with self._session_factory() as session:
            row = await session.get(LevelTable, level_id)
            if not row:
                return None
            return LevelDefinition(
                level_id=row.level_id,
                name=row.name,
                reward=row.reward,
                energy_cost=row.energy_cost,
                metadata=dict(row.details or {}),
            )

    async def save_level(self, level: LevelDefinition) -> None:
        async with self._session_factory() as session:
            await session.merge(
                LevelTable(
                    level_id=level.level_id,
                    name=level.name,
                    reward=level.reward,
                    energy_cost=level.energy_cost,
                    details=dict(level.metadata),
                )
            )
            await session.commit()
