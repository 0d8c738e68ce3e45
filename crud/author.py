# crud/author.py
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Author, Book
from schemas import AuthorForm


def _author_values(author_data: AuthorForm) -> dict:
    return author_data.model_dump(include={"first_name", "family_name", "date_of_birth", "date_of_death"})


async def get_authors(db: AsyncSession) -> List[Author]:
    result = await db.execute(select(Author).order_by(Author.family_name, Author.first_name))
    return result.scalars().all()


async def get_author(db: AsyncSession, author_id: str) -> Optional[Author]:
    result = await db.execute(select(Author).where(Author.id == author_id))
    return result.scalar_one_or_none()


async def get_author_books(db: AsyncSession, author_id: str) -> List[Book]:
    result = await db.execute(select(Book).where(Book.author_id == author_id).order_by(Book.title))
    return result.scalars().all()


async def count_authors(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(Author))
    return result.scalar_one()


async def create_author(db: AsyncSession, author_data: AuthorForm) -> Author:
    author = Author(**_author_values(author_data))
    db.add(author)
    await db.commit()
    await db.refresh(author)
    return author


async def update_author(db: AsyncSession, author_id: str, author_data: AuthorForm) -> Optional[Author]:
    author = await get_author(db, author_id)
    if author is None:
        return None
    for key, value in _author_values(author_data).items():
        setattr(author, key, value)
    await db.commit()
    return author


async def delete_author(db: AsyncSession, author_id: str):
    await db.execute(delete(Author).where(Author.id == author_id))
    await db.commit()
