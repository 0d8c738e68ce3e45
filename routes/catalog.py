# routes/catalog.py: home page with record counts
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from crud.author import count_authors
from crud.book import count_books
from crud.bookinstance import count_bookinstances
from crud.genre import count_genres
from database import Store, get_store
from services.aggregator import gather_named
from services.forms import render

router = APIRouter()


@router.get("/")
async def root():
    return RedirectResponse("/catalog", status_code=303)


@router.get("/catalog", response_class=HTMLResponse)
async def index(request: Request, store: Store = Depends(get_store)):
    data = await gather_named(
        store,
        book_count=count_books,
        book_instance_count=count_bookinstances,
        book_instance_available_count=lambda db: count_bookinstances(db, status="Available"),
        author_count=count_authors,
        genre_count=count_genres,
    )
    return render(request, "index.html", {"title": "Local Library Home", "data": data})
