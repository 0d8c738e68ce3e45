# routes/authors.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from crud.author import create_author, get_author, get_author_books, get_authors, update_author
from database import Store, get_db, get_store
from schemas import AuthorForm
from services.aggregator import gather_named
from services.forms import read_form, render, render_form
from services.guard import check_delete, delete_if_unreferenced
from services.validation import validate_author

router = APIRouter(prefix="/catalog")
logger = logging.getLogger("catalog.routes.authors")


@router.get("/authors", response_class=HTMLResponse)
async def author_list(request: Request, db: AsyncSession = Depends(get_db)):
    authors = await get_authors(db)
    return render(request, "author_list.html", {"title": "Author List", "author_list": authors})


@router.get("/author/create", response_class=HTMLResponse)
async def author_create_get(request: Request):
    return render_form(request, "author_form.html", "Create Author", author=None)


@router.post("/author/create")
async def author_create_post(request: Request, db: AsyncSession = Depends(get_db)):
    result = validate_author(await read_form(request))
    author = AuthorForm(**result.data)
    if not result.is_valid:
        logger.debug("author form rejected: %s", [e.field for e in result.errors])
        return render_form(request, "author_form.html", "Create Author", result.errors, author=author)

    created = await create_author(db, author)
    logger.info("created author %s", created.id)
    return RedirectResponse(created.url, status_code=303)


@router.get("/author/{author_id}", response_class=HTMLResponse)
async def author_detail(author_id: str, request: Request, store: Store = Depends(get_store)):
    results = await gather_named(
        store,
        author=lambda db: get_author(db, author_id),
        author_books=lambda db: get_author_books(db, author_id),
    )
    if results["author"] is None:
        raise HTTPException(404, "Author not found")
    return render(request, "author_detail.html", {"title": "Author Detail", **results})


def _render_delete(request: Request, check):
    return render(request, "author_delete.html", {
        "title": "Delete Author",
        "author": check.target,
        "author_books": check.dependents,
    })


@router.get("/author/{author_id}/delete", response_class=HTMLResponse)
async def author_delete_get(author_id: str, request: Request, store: Store = Depends(get_store)):
    check = await check_delete(store, "author", author_id)
    if not check.exists:
        return RedirectResponse("/catalog/authors", status_code=303)
    return _render_delete(request, check)


@router.post("/author/{author_id}/delete")
async def author_delete_post(author_id: str, request: Request, store: Store = Depends(get_store)):
    check = await delete_if_unreferenced(store, "author", author_id)
    if check.blocked:
        # Author still has books: show them again, same as the GET page.
        return _render_delete(request, check)
    return RedirectResponse("/catalog/authors", status_code=303)


@router.get("/author/{author_id}/update", response_class=HTMLResponse)
async def author_update_get(author_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    author = await get_author(db, author_id)
    if author is None:
        raise HTTPException(404, "Author not found")
    return render_form(request, "author_form.html", "Update Author", author=author)


@router.post("/author/{author_id}/update")
async def author_update_post(author_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    result = validate_author(await read_form(request))
    author = AuthorForm(id=author_id, **result.data)
    if not result.is_valid:
        return render_form(request, "author_form.html", "Update Author", result.errors, author=author)

    updated = await update_author(db, author_id, author)
    if updated is None:
        raise HTTPException(404, "Author not found")
    logger.info("updated author %s", author_id)
    return RedirectResponse(updated.url, status_code=303)
