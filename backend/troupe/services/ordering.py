"""Ordered sibling sets: append, reorder and delete for models with an ``order`` column.

A sibling set is every row of one model (all sketches, all team members).
Ascending ``order`` is the display sequence. Appends go after the highest
order ever assigned (kept in ``order_counters``), deletions leave gaps that are
never reused, and a reorder rewrites every row to its zero-based position in
the submitted sequence.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Sequence, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from troupe.errors import ReorderMismatchError
from troupe.models.mixins import OrderedMixin
from troupe.models.order_counter import OrderCounter

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=OrderedMixin)


def _ordered(model: type[T]):
    # created_at and id only break ties left by concurrent appends
    return select(model).order_by(model.order, model.created_at, model.id)


async def list_ordered(db: AsyncSession, model: type[T]) -> list[T]:
    """Return the sibling set ascending by ``order``."""
    result = await db.execute(_ordered(model))
    return list(result.scalars().all())


async def next_order(db: AsyncSession, model: type[T]) -> int:
    """One past the highest order ever assigned in the collection.

    That is ``max(high_water, max(order)) + 1``, so slots vacated by deletes
    are not reused; 0 for a collection that never had a row.
    """
    result = await db.execute(select(func.max(model.order)))
    max_order = result.scalar()
    counter = await db.get(OrderCounter, model.__tablename__)
    high_water = counter.high_water if counter is not None else -1
    return max(high_water, max_order if max_order is not None else -1) + 1


async def _lock_counter(db: AsyncSession, model: type[T]) -> OrderCounter:
    """Fetch the collection's counter row FOR UPDATE, creating it on first use."""
    name = model.__tablename__
    counter = await db.get(OrderCounter, name, with_for_update=True)
    if counter is None:
        # first append ever; inserted by the flush in append()
        counter = OrderCounter(collection=name, high_water=-1)
        db.add(counter)
    return counter


async def append(db: AsyncSession, model: type[T], **fields: Any) -> T:
    """Insert a new row positioned after every existing sibling."""
    counter = await _lock_counter(db, model)
    order = await next_order(db, model)
    counter.high_water = order
    item = model(order=order, **fields)
    db.add(item)
    await db.flush()
    await db.refresh(item)
    logger.info("Appended %s %s at order %d", model.__tablename__, item.id, item.order)
    return item


def check_permutation(current_ids: Sequence[str], ids: Sequence[str]) -> None:
    """Raise ReorderMismatchError unless ``ids`` is a permutation of ``current_ids``."""
    counts = Counter(ids)
    duplicates = sorted(i for i, n in counts.items() if n > 1)
    current = set(current_ids)
    unknown = sorted(set(ids) - current)
    missing = sorted(current - set(ids))
    if duplicates or unknown or missing:
        raise ReorderMismatchError(
            "Submitted order does not match the current items "
            f"(missing={len(missing)}, unknown={len(unknown)}, duplicates={len(duplicates)})",
            missing=missing,
            unknown=unknown,
            duplicates=duplicates,
        )


async def reorder(db: AsyncSession, model: type[T], ids: Sequence[str]) -> list[T]:
    """Rewrite ``order`` of every sibling to its position in ``ids``.

    ``ids`` must contain each current sibling exactly once; otherwise nothing
    is written and ReorderMismatchError is raised. Rows are updated one at a
    time.

    Returns:
        The sibling set in its new order.
    """
    result = await db.execute(select(model.id))
    check_permutation([row[0] for row in result.all()], ids)

    for position, item_id in enumerate(ids):
        await db.execute(
            update(model)
            .where(model.id == item_id)
            .values(order=position)
            .execution_options(synchronize_session=False)
        )
    await db.flush()
    db.expire_all()

    logger.info("Reordered %d %s", len(ids), model.__tablename__)
    return await list_ordered(db, model)


async def delete(db: AsyncSession, item: OrderedMixin) -> None:
    """Remove one sibling; the others keep their ``order`` values."""
    await db.delete(item)
    await db.flush()
