# routes/bookinstances.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from crud.book import get_books
from crud.bookinstance import (
    create_bookinstance,
    delete_bookinstance,
    get_bookinstance,
    get_bookinstances,
    update_bookinstance,
)
from database import Store, get_db, get_store
from schemas import BookInstanceForm
from services.aggregator import gather_named
from services.forms import read_form, render, render_form
from services.validation import validate_bookinstance

router = APIRouter(prefix="/catalog")
logger = logging.getLogger("catalog.routes.bookinstances")


def _copy_title(instance) -> str:
    return "Copy: " + (instance.book.title if instance.book else "")


async def _render_bookinstance_form(request: Request, store: Store, title: str, bookinstance=None, errors=None):
    results = await gather_named(store, books=get_books)
    selected_book = bookinstance.book if bookinstance is not None else None
    return render_form(
        request, "bookinstance_form.html", title, errors,
        book_list=results["books"], selected_book=selected_book, bookinstance=bookinstance,
    )


@router.get("/bookinstances", response_class=HTMLResponse)
async def bookinstance_list(request: Request, db: AsyncSession = Depends(get_db)):
    instances = await get_bookinstances(db)
    return render(request, "bookinstance_list.html", {
        "title": "Book Instance List",
        "bookinstance_list": instances,
    })


@router.get("/bookinstance/create", response_class=HTMLResponse)
async def bookinstance_create_get(request: Request, store: Store = Depends(get_store)):
    return await _render_bookinstance_form(request, store, "Create BookInstance")


@router.post("/bookinstance/create")
async def bookinstance_create_post(
    request: Request,
    store: Store = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    result = validate_bookinstance(await read_form(request))
    bookinstance = BookInstanceForm(**result.data)
    if not result.is_valid:
        return await _render_bookinstance_form(request, store, "Create BookInstance", bookinstance, result.errors)

    created = await create_bookinstance(db, bookinstance)
    logger.info("created book instance %s of book %s", created.id, created.book_id)
    return RedirectResponse(created.url, status_code=303)


@router.get("/bookinstance/{instance_id}", response_class=HTMLResponse)
async def bookinstance_detail(instance_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    instance = await get_bookinstance(db, instance_id)
    if instance is None:
        raise HTTPException(404, "Book copy not found")
    return render(request, "bookinstance_detail.html", {
        "title": _copy_title(instance),
        "bookinstance": instance,
    })


@router.get("/bookinstance/{instance_id}/delete", response_class=HTMLResponse)
async def bookinstance_delete_get(instance_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    instance = await get_bookinstance(db, instance_id)
    if instance is None:
        return RedirectResponse("/catalog/bookinstances", status_code=303)
    return render(request, "bookinstance_delete.html", {
        "title": "Delete BookInstance",
        "bookinstance": instance,
    })


@router.post("/bookinstance/{instance_id}/delete")
async def bookinstance_delete_post(instance_id: str, db: AsyncSession = Depends(get_db)):
    # Nothing references a copy, so there is nothing to check first.
    await delete_bookinstance(db, instance_id)
    logger.info("deleted book instance %s", instance_id)
    return RedirectResponse("/catalog/bookinstances", status_code=303)


@router.get("/bookinstance/{instance_id}/update", response_class=HTMLResponse)
async def bookinstance_update_get(instance_id: str, request: Request, store: Store = Depends(get_store)):
    results = await gather_named(
        store,
        bookinstance=lambda db: get_bookinstance(db, instance_id),
        books=get_books,
    )
    instance = results["bookinstance"]
    if instance is None:
        raise HTTPException(404, "Book copy not found")
    return render_form(
        request, "bookinstance_form.html", "Update BookInstance",
        book_list=results["books"], selected_book=instance.book_id, bookinstance=instance,
    )


@router.post("/bookinstance/{instance_id}/update")
async def bookinstance_update_post(
    instance_id: str,
    request: Request,
    store: Store = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    result = validate_bookinstance(await read_form(request))
    bookinstance = BookInstanceForm(id=instance_id, **result.data)
    if not result.is_valid:
        return await _render_bookinstance_form(request, store, "Update BookInstance", bookinstance, result.errors)

    updated = await update_bookinstance(db, instance_id, bookinstance)
    if updated is None:
        raise HTTPException(404, "Book copy not found")
    logger.info("updated book instance %s", instance_id)
    return RedirectResponse(updated.url, status_code=303)
