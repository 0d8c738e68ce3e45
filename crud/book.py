# crud/book.py
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from crud.genre import get_genres_by_ids
from models import Book, BookInstance
from schemas import BookForm


async def get_books(db: AsyncSession) -> List[Book]:
    result = await db.execute(select(Book).order_by(Book.title))
    return result.scalars().all()


async def get_book(db: AsyncSession, book_id: str) -> Optional[Book]:
    result = await db.execute(select(Book).where(Book.id == book_id))
    return result.scalar_one_or_none()


async def get_book_instances(db: AsyncSession, book_id: str) -> List[BookInstance]:
    result = await db.execute(select(BookInstance).where(BookInstance.book_id == book_id))
    return result.scalars().all()


async def count_books(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(Book))
    return result.scalar_one()


async def create_book(db: AsyncSession, book_data: BookForm) -> Book:
    book = Book(
        title=book_data.title,
        author_id=book_data.author,
        summary=book_data.summary,
        isbn=book_data.isbn,
        genre=await get_genres_by_ids(db, book_data.genre),
    )
    db.add(book)
    await db.commit()
    await db.refresh(book)
    return book


async def update_book(db: AsyncSession, book_id: str, book_data: BookForm) -> Optional[Book]:
    book = await get_book(db, book_id)
    if book is None:
        return None
    book.title = book_data.title
    book.author_id = book_data.author
    book.summary = book_data.summary
    book.isbn = book_data.isbn
    book.genre = await get_genres_by_ids(db, book_data.genre)
    await db.commit()
    return book


async def delete_book(db: AsyncSession, book_id: str):
    # ORM delete so the book_genre rows go with it
    book = await get_book(db, book_id)
    if book is not None:
        await db.delete(book)
        await db.commit()
