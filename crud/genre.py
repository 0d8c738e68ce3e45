# crud/genre.py
from typing import List, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Book, Genre
from schemas import GenreForm


async def get_genres(db: AsyncSession) -> List[Genre]:
    result = await db.execute(select(Genre).order_by(Genre.name))
    return result.scalars().all()


async def get_genre(db: AsyncSession, genre_id: str) -> Optional[Genre]:
    result = await db.execute(select(Genre).where(Genre.id == genre_id))
    return result.scalar_one_or_none()


async def get_genres_by_ids(db: AsyncSession, genre_ids: Sequence[str]) -> List[Genre]:
    if not genre_ids:
        return []
    result = await db.execute(select(Genre).where(Genre.id.in_(genre_ids)))
    return result.scalars().all()


async def find_genre_by_name(db: AsyncSession, name: str) -> Optional[Genre]:
    result = await db.execute(select(Genre).where(Genre.name == name).limit(1))
    return result.scalars().first()


async def get_genre_books(db: AsyncSession, genre_id: str) -> List[Book]:
    result = await db.execute(
        select(Book).where(Book.genre.any(Genre.id == genre_id)).order_by(Book.title)
    )
    return result.scalars().all()


async def count_genres(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(Genre))
    return result.scalar_one()


async def create_genre(db: AsyncSession, genre_data: GenreForm) -> Genre:
    genre = Genre(name=genre_data.name)
    db.add(genre)
    await db.commit()
    await db.refresh(genre)
    return genre


async def find_or_create_genre(db: AsyncSession, genre_data: GenreForm) -> tuple[Genre, bool]:
    """Return (genre, created). Lookup then insert: two concurrent creates can both insert."""
    existing = await find_genre_by_name(db, genre_data.name)
    if existing:
        return existing, False
    return await create_genre(db, genre_data), True


async def update_genre(db: AsyncSession, genre_id: str, genre_data: GenreForm) -> Optional[Genre]:
    genre = await get_genre(db, genre_id)
    if genre is None:
        return None
    genre.name = genre_data.name
    await db.commit()
    return genre


async def delete_genre(db: AsyncSession, genre_id: str):
    await db.execute(delete(Genre).where(Genre.id == genre_id))
    await db.commit()
