"""SQLAlchemy storage backend for LootForge."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Sequence

from sqlalchemy import JSON, Date, DateTime, Float, Integer, String, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..domain.rewards import InventoryItem, RewardDefinition, Tier
from .base import (
    CatalogSnapshot,
    CatalogStore,
    GachaHistoryRecord,
    HistoryStore,
    PlayerRecord,
    PlayerStore,
)


class Base(DeclarativeBase):
    pass


class PlayerTable(Base):
    __tablename__ = "lootforge_players"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    balance: Mapped[float] = mapped_column(Float, default=0.0)


class InventoryTable(Base):
    __tablename__ = "lootforge_inventory"

    # seq preserves the ledger's insertion order across reloads.
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_id: Mapped[str] = mapped_column(String(64), unique=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True)
    reward_id: Mapped[str] = mapped_column(String(128))
    name: Mapped[str] = mapped_column(String(255))
    image: Mapped[str] = mapped_column(String(512))
    tier: Mapped[int] = mapped_column(Integer)
    acquired_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    aura_colors: Mapped[list | None] = mapped_column(JSON, nullable=True)


class CatalogTable(Base):
    __tablename__ = "lootforge_catalog"

    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    reward_id: Mapped[str] = mapped_column(String(128))
    name: Mapped[str] = mapped_column(String(255))
    image: Mapped[str] = mapped_column(String(512))
    tier: Mapped[int] = mapped_column(Integer)
    description: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    aura_colors: Mapped[list | None] = mapped_column(JSON, nullable=True)


class CatalogStateTable(Base):
    __tablename__ = "lootforge_catalog_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    refreshed_on: Mapped[date | None] = mapped_column(Date, nullable=True)


class HistoryTable(Base):
    __tablename__ = "lootforge_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True)
    action: Mapped[str] = mapped_column(String(16))
    reward_id: Mapped[str] = mapped_column(String(128))
    reward_name: Mapped[str] = mapped_column(String(255))
    tier: Mapped[int] = mapped_column(Integer)
    cost: Mapped[float] = mapped_column(Float, default=0.0)
    consumed_ids: Mapped[list] = mapped_column(JSON, default=list)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True))


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AsyncSQLAlchemyStorage:
    """Bundle of async stores backed by SQLAlchemy."""

    def __init__(self, dsn: str, *, echo: bool = False, starting_balance: float = 0.0) -> None:
        self._engine = create_async_engine(dsn, echo=echo, future=True)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)
        self._starting_balance = starting_balance

    async def init_models(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()

    def player_store(self) -> "AsyncSQLAlchemyPlayerStore":
        return AsyncSQLAlchemyPlayerStore(
            self._session_factory, starting_balance=self._starting_balance
        )

    def catalog_store(self) -> "AsyncSQLAlchemyCatalogStore":
        return AsyncSQLAlchemyCatalogStore(self._session_factory)

    def history_store(self) -> "AsyncSQLAlchemyHistoryStore":
        return AsyncSQLAlchemyHistoryStore(self._session_factory)


class AsyncSQLAlchemyPlayerStore(PlayerStore):
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        starting_balance: float = 0.0,
    ) -> None:
        self._session_factory = session_factory
        self._starting_balance = starting_balance

    async def get_or_create(self, user_id: int, username: str | None = None) -> PlayerRecord:
        async with self._session_factory() as session:
            record = await session.get(PlayerTable, user_id)
            if not record:
                record = PlayerTable(
                    user_id=user_id, username=username, balance=self._starting_balance
                )
                session.add(record)
                await session.commit()
            if username and record.username != username:
                record.username = username
                await session.commit()
            stmt = (
                select(InventoryTable)
                .where(InventoryTable.user_id == user_id)
                .order_by(InventoryTable.seq)
            )
            rows = (await session.execute(stmt)).scalars().all()
            return PlayerRecord(
                user_id=record.user_id,
                username=record.username,
                balance=record.balance,
                inventory=[_row_to_item(row) for row in rows],
            )

    async def save(self, record: PlayerRecord) -> None:
        async with self._session_factory() as session:
            stmt = update(PlayerTable).where(PlayerTable.user_id == record.user_id).values(
                username=record.username,
                balance=record.balance,
            )
            result = await session.execute(stmt)
            if result.rowcount == 0:
                session.add(
                    PlayerTable(
                        user_id=record.user_id,
                        username=record.username,
                        balance=record.balance,
                    )
                )
            await session.commit()

    async def persist_inventory_delta(
        self,
        user_id: int,
        *,
        balance: float,
        added: Sequence[InventoryItem],
        removed_ids: Sequence[str],
    ) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await session.execute(
                    update(PlayerTable)
                    .where(PlayerTable.user_id == user_id)
                    .values(balance=balance)
                )
                if removed_ids:
                    await session.execute(
                        delete(InventoryTable).where(
                            InventoryTable.user_id == user_id,
                            InventoryTable.item_id.in_(list(removed_ids)),
                        )
                    )
                for item in added:
                    session.add(
                        InventoryTable(
                            item_id=item.item_id,
                            user_id=user_id,
                            reward_id=item.reward_id,
                            name=item.name,
                            image=item.image,
                            tier=int(item.tier),
                            acquired_at=item.acquired_at,
                            aura_colors=list(item.aura_colors) if item.aura_colors else None,
                        )
                    )


class AsyncSQLAlchemyCatalogStore(CatalogStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def load(self) -> CatalogSnapshot:
        async with self._session_factory() as session:
            rows = (
                await session.execute(select(CatalogTable).order_by(CatalogTable.position))
            ).scalars().all()
            state = await session.get(CatalogStateTable, 1)
            return CatalogSnapshot(
                definitions=tuple(
                    RewardDefinition(
                        reward_id=row.reward_id,
                        name=row.name,
                        image=row.image,
                        tier=Tier(row.tier),
                        description=row.description,
                        aura_colors=tuple(row.aura_colors) if row.aura_colors else None,
                    )
                    for row in rows
                ),
                refreshed_on=state.refreshed_on if state else None,
            )

    async def replace(
        self, definitions: Sequence[RewardDefinition], refreshed_on: date | None
    ) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await session.execute(delete(CatalogTable))
                for position, definition in enumerate(definitions):
                    session.add(
                        CatalogTable(
                            position=position,
                            reward_id=definition.reward_id,
                            name=definition.name,
                            image=definition.image,
                            tier=int(definition.tier),
                            description=definition.description,
                            aura_colors=(
                                list(definition.aura_colors) if definition.aura_colors else None
                            ),
                        )
                    )
                state = await session.get(CatalogStateTable, 1)
                if state is None:
                    session.add(CatalogStateTable(id=1, refreshed_on=refreshed_on))
                else:
                    state.refreshed_on = refreshed_on


class AsyncSQLAlchemyHistoryStore(HistoryStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add_record(self, record: GachaHistoryRecord) -> None:
        async with self._session_factory() as session:
            session.add(
                HistoryTable(
                    user_id=record.user_id,
                    action=record.action,
                    reward_id=record.reward_id,
                    reward_name=record.reward_name,
                    tier=record.tier,
                    cost=record.cost,
                    consumed_ids=list(record.consumed_ids),
                    timestamp=record.timestamp,
                )
            )
            await session.commit()

    async def recent_for_user(self, user_id: int, limit: int = 20) -> Sequence[GachaHistoryRecord]:
        async with self._session_factory() as session:
            stmt = (
                select(HistoryTable)
                .where(HistoryTable.user_id == user_id)
                .order_by(HistoryTable.id.desc())
                .limit(limit)
            )
            rows = (await session.execute(stmt)).scalars().all()
            return [
                GachaHistoryRecord(
                    user_id=row.user_id,
                    action=row.action,
                    reward_id=row.reward_id,
                    reward_name=row.reward_name,
                    tier=row.tier,
                    cost=row.cost,
                    consumed_ids=tuple(row.consumed_ids or ()),
                    timestamp=_aware(row.timestamp),
                )
                for row in rows
            ]


def _row_to_item(row: InventoryTable) -> InventoryItem:
    return InventoryItem(
        item_id=row.item_id,
        reward_id=row.reward_id,
        name=row.name,
        image=row.image,
        tier=Tier(row.tier),
        acquired_at=_aware(row.acquired_at),
        aura_colors=tuple(row.aura_colors) if row.aura_colors else None,
    )
