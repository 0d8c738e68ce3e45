# crud/bookinstance.py
from datetime import date
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models import DEFAULT_STATUS, BookInstance
from schemas import BookInstanceForm


def _instance_values(data: BookInstanceForm) -> dict:
    # Missing status/due date fall back to the defaults, on update too.
    return {
        "book_id": data.book,
        "imprint": data.imprint,
        "status": data.status or DEFAULT_STATUS,
        "due_back": data.due_back or date.today(),
    }


async def get_bookinstances(db: AsyncSession) -> List[BookInstance]:
    result = await db.execute(select(BookInstance).order_by(BookInstance.due_back))
    return result.scalars().all()


async def get_bookinstance(db: AsyncSession, instance_id: str) -> Optional[BookInstance]:
    result = await db.execute(select(BookInstance).where(BookInstance.id == instance_id))
    return result.scalar_one_or_none()


async def count_bookinstances(db: AsyncSession, status: Optional[str] = None) -> int:
    stmt = select(func.count()).select_from(BookInstance)
    if status:
        stmt = stmt.where(BookInstance.status == status)
    result = await db.execute(stmt)
    return result.scalar_one()


async def create_bookinstance(db: AsyncSession, data: BookInstanceForm) -> BookInstance:
    instance = BookInstance(**_instance_values(data))
    db.add(instance)
    await db.commit()
    await db.refresh(instance)
    return instance


async def update_bookinstance(db: AsyncSession, instance_id: str, data: BookInstanceForm) -> Optional[BookInstance]:
    instance = await get_bookinstance(db, instance_id)
    if instance is None:
        return None
    for key, value in _instance_values(data).items():
        setattr(instance, key, value)
    await db.commit()
    return instance


async def delete_bookinstance(db: AsyncSession, instance_id: str):
    await db.execute(delete(BookInstance).where(BookInstance.id == instance_id))
    await db.commit()
