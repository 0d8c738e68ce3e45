from datetime import date

from crud.bookinstance import get_bookinstance


def test_create_copy_without_due_date_defaults_to_today(client, make_author, make_book, make_copy, run_in_app):
    book_id = make_book(make_author())
    copy_id = make_copy(book_id, status="Loaned", due_back="")
    copy = run_in_app(lambda db: get_bookinstance(db, copy_id))
    assert copy.due_back == date.today()
    assert copy.status == "Loaned"


def test_create_copy_with_empty_status_uses_maintenance(client, make_author, make_book, make_copy, run_in_app):
    copy_id = make_copy(make_book(make_author()), status="")
    assert run_in_app(lambda db: get_bookinstance(db, copy_id)).status == "Maintenance"


def test_copy_detail_shows_book_and_due_date(client, make_author, make_book, make_copy):
    book_id = make_book(make_author(), title="Mistborn")
    copy_id = make_copy(book_id, status="Reserved", due_back="2030-02-03")
    response = client.get(f"/catalog/bookinstance/{copy_id}")
    assert response.status_code == 200
    assert "<title>Copy: Mistborn</title>" in response.text
    assert "Feb 3, 2030" in response.text


def test_invalid_copy_keeps_selected_book(client, make_author, make_book):
    book_id = make_book(make_author())
    response = client.post(
        "/catalog/bookinstance/create",
        data={"book": book_id, "imprint": "", "status": "Available", "due_back": "not a date"},
    )
    assert response.status_code == 200
    assert "Imprint must be specified" in response.text
    assert "Invalid date" in response.text
    assert f'<option value="{book_id}" selected>' in response.text
    assert "There are no book copies in this library." in client.get("/catalog/bookinstances").text


def test_update_copy(client, make_author, make_book, make_copy, run_in_app):
    book_id = make_book(make_author())
    copy_id = make_copy(book_id)

    form = client.get(f"/catalog/bookinstance/{copy_id}/update")
    assert f'<option value="{book_id}" selected>' in form.text

    response = client.post(
        f"/catalog/bookinstance/{copy_id}/update",
        data={"book": book_id, "imprint": "New imprint", "status": "Loaned", "due_back": "2031-05-01"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == f"/catalog/bookinstance/{copy_id}"
    copy = run_in_app(lambda db: get_bookinstance(db, copy_id))
    assert copy.imprint == "New imprint"
    assert copy.due_back_yyyy_mm_dd == "2031-05-01"


def test_delete_copy_is_unconditional(client, make_author, make_book, make_copy):
    copy_id = make_copy(make_book(make_author()))
    page = client.get(f"/catalog/bookinstance/{copy_id}/delete")
    assert "Do you really want to delete this BookInstance?" in page.text

    response = client.post(f"/catalog/bookinstance/{copy_id}/delete", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/catalog/bookinstances"
    assert client.get(f"/catalog/bookinstance/{copy_id}").status_code == 404
    assert "Book copy not found" in client.get(f"/catalog/bookinstance/{copy_id}").text


def test_copy_forms_load_books_through_the_aggregator(client, make_author, make_book, make_copy, monkeypatch):
    import routes.bookinstances as bookinstance_routes

    calls = []
    real_gather_named = bookinstance_routes.gather_named

    async def recording_gather_named(store, **operations):
        calls.append(sorted(operations))
        return await real_gather_named(store, **operations)

    monkeypatch.setattr(bookinstance_routes, "gather_named", recording_gather_named)
    book_id = make_book(make_author(), title="Elantris")
    copy_id = make_copy(book_id)

    form = client.get("/catalog/bookinstance/create")
    assert "Elantris" in form.text
    assert "selected>" not in form.text

    response = client.post(
        f"/catalog/bookinstance/{copy_id}/update",
        data={"book": book_id, "imprint": "", "status": "Loaned"},
    )
    assert "Imprint must be specified" in response.text
    assert f'<option value="{book_id}" selected>' in response.text
    assert calls == [["books"], ["books"]]
