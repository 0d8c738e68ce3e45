# routes/genres.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from crud.genre import find_or_create_genre, get_genre, get_genre_books, get_genres, update_genre
from database import Store, get_db, get_store
from schemas import GenreForm
from services.aggregator import gather_named
from services.forms import read_form, render, render_form
from services.guard import check_delete, delete_if_unreferenced
from services.validation import validate_genre

router = APIRouter(prefix="/catalog")
logger = logging.getLogger("catalog.routes.genres")


@router.get("/genres", response_class=HTMLResponse)
async def genre_list(request: Request, db: AsyncSession = Depends(get_db)):
    genres = await get_genres(db)
    return render(request, "genre_list.html", {"title": "Genre List", "list_genres": genres})


@router.get("/genre/create", response_class=HTMLResponse)
async def genre_create_get(request: Request):
    return render_form(request, "genre_form.html", "Create Genre", genre=None)


@router.post("/genre/create")
async def genre_create_post(request: Request, db: AsyncSession = Depends(get_db)):
    result = validate_genre(await read_form(request))
    genre = GenreForm(**result.data)
    if not result.is_valid:
        return render_form(request, "genre_form.html", "Create Genre", result.errors, genre=genre)

    # An existing genre with this name wins; send the user there instead.
    saved, created = await find_or_create_genre(db, genre)
    if created:
        logger.info("created genre %s", saved.id)
    return RedirectResponse(saved.url, status_code=303)


@router.get("/genre/{genre_id}", response_class=HTMLResponse)
async def genre_detail(genre_id: str, request: Request, store: Store = Depends(get_store)):
    results = await gather_named(
        store,
        genre=lambda db: get_genre(db, genre_id),
        genre_books=lambda db: get_genre_books(db, genre_id),
    )
    if results["genre"] is None:
        raise HTTPException(404, "Genre not found")
    return render(request, "genre_detail.html", {"title": "Genre Detail", **results})


def _render_delete(request: Request, check):
    return render(request, "genre_delete.html", {
        "title": "Delete Genre",
        "genre": check.target,
        "genre_books": check.dependents,
    })


@router.get("/genre/{genre_id}/delete", response_class=HTMLResponse)
async def genre_delete_get(genre_id: str, request: Request, store: Store = Depends(get_store)):
    check = await check_delete(store, "genre", genre_id)
    if not check.exists:
        return RedirectResponse("/catalog/genres", status_code=303)
    return _render_delete(request, check)


@router.post("/genre/{genre_id}/delete")
async def genre_delete_post(genre_id: str, request: Request, store: Store = Depends(get_store)):
    check = await delete_if_unreferenced(store, "genre", genre_id)
    if check.blocked:
        return _render_delete(request, check)
    return RedirectResponse("/catalog/genres", status_code=303)


@router.get("/genre/{genre_id}/update", response_class=HTMLResponse)
async def genre_update_get(genre_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    genre = await get_genre(db, genre_id)
    if genre is None:
        raise HTTPException(404, "Genre not found")
    return render_form(request, "genre_form.html", "Update Genre", genre=genre)


@router.post("/genre/{genre_id}/update")
async def genre_update_post(genre_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    result = validate_genre(await read_form(request), updating=True)
    genre = GenreForm(id=genre_id, **result.data)
    if not result.is_valid:
        return render_form(request, "genre_form.html", "Update Genre", result.errors, genre=genre)

    updated = await update_genre(db, genre_id, genre)
    if updated is None:
        raise HTTPException(404, "Genre not found")
    logger.info("updated genre %s", genre_id)
    return RedirectResponse(updated.url, status_code=303)
