# routes/books.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from crud.author import get_authors
from crud.book import create_book, get_book, get_book_instances, get_books, update_book
from crud.genre import get_genres
from database import Store, get_db, get_store
from schemas import BookForm
from services.aggregator import gather_named
from services.forms import mark_checked, read_form, render, render_form
from services.guard import check_delete, delete_if_unreferenced
from services.validation import validate_book

router = APIRouter(prefix="/catalog")
logger = logging.getLogger("catalog.routes.books")


def _book_form(request: Request, title: str, book, authors, genres, errors=None):
    """Book form with every author and genre; the book's own choices come back selected."""
    if isinstance(book, BookForm):
        selected_author, selected_genres = book.author, book.genre
    elif book is not None:
        selected_author, selected_genres = book.author_id, [g.id for g in book.genre]
    else:
        selected_author, selected_genres = None, []

    return render_form(
        request, "book_form.html", title, errors,
        book=book,
        authors=authors,
        genres=mark_checked(genres, selected_genres),
        selected_author=selected_author,
    )


async def _render_book_form(request: Request, store: Store, title: str, book=None, errors=None):
    results = await gather_named(store, authors=get_authors, genres=get_genres)
    return _book_form(request, title, book, results["authors"], results["genres"], errors)


@router.get("/books", response_class=HTMLResponse)
async def book_list(request: Request, db: AsyncSession = Depends(get_db)):
    books = await get_books(db)
    return render(request, "book_list.html", {"title": "Book List", "book_list": books})


@router.get("/book/create", response_class=HTMLResponse)
async def book_create_get(request: Request, store: Store = Depends(get_store)):
    return await _render_book_form(request, store, "Create Book")


@router.post("/book/create")
async def book_create_post(
    request: Request,
    store: Store = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    # genre arrives as nothing, one id or a list of ids; validation turns it into a list
    result = validate_book(await read_form(request))
    book = BookForm(**result.data)
    if not result.is_valid:
        return await _render_book_form(request, store, "Create Book", book, result.errors)

    created = await create_book(db, book)
    logger.info("created book %s", created.id)
    return RedirectResponse(created.url, status_code=303)


@router.get("/book/{book_id}", response_class=HTMLResponse)
async def book_detail(book_id: str, request: Request, store: Store = Depends(get_store)):
    results = await gather_named(
        store,
        book=lambda db: get_book(db, book_id),
        book_instances=lambda db: get_book_instances(db, book_id),
    )
    if results["book"] is None:
        raise HTTPException(404, "Book not found")
    return render(request, "book_detail.html", {"title": results["book"].title, **results})


def _render_delete(request: Request, check):
    return render(request, "book_delete.html", {
        "title": "Delete Book",
        "book": check.target,
        "book_instances": check.dependents,
    })


@router.get("/book/{book_id}/delete", response_class=HTMLResponse)
async def book_delete_get(book_id: str, request: Request, store: Store = Depends(get_store)):
    check = await check_delete(store, "book", book_id)
    if not check.exists:
        return RedirectResponse("/catalog/books", status_code=303)
    return _render_delete(request, check)


@router.post("/book/{book_id}/delete")
async def book_delete_post(book_id: str, request: Request, store: Store = Depends(get_store)):
    check = await delete_if_unreferenced(store, "book", book_id)
    if check.blocked:
        return _render_delete(request, check)
    return RedirectResponse("/catalog/books", status_code=303)


@router.get("/book/{book_id}/update", response_class=HTMLResponse)
async def book_update_get(book_id: str, request: Request, store: Store = Depends(get_store)):
    results = await gather_named(
        store,
        book=lambda db: get_book(db, book_id),
        authors=get_authors,
        genres=get_genres,
    )
    if results["book"] is None:
        raise HTTPException(404, "Book not found")
    return _book_form(request, "Update Book", results["book"], results["authors"], results["genres"])


@router.post("/book/{book_id}/update")
async def book_update_post(
    book_id: str,
    request: Request,
    store: Store = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    result = validate_book(await read_form(request))
    book = BookForm(id=book_id, **result.data)
    if not result.is_valid:
        return await _render_book_form(request, store, "Update Book", book, result.errors)

    updated = await update_book(db, book_id, book)
    if updated is None:
        raise HTTPException(404, "Book not found")
    logger.info("updated book %s", book_id)
    return RedirectResponse(updated.url, status_code=303)
