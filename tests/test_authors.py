from crud.author import get_author


def test_create_author_redirects_to_detail(client, make_author):
    author_id = make_author("Patrick", "Rothfuss", date_of_birth="1973-06-06")
    response = client.get(f"/catalog/author/{author_id}")
    assert response.status_code == 200
    assert "Rothfuss, Patrick" in response.text
    assert "Jun 6, 1973 -" in response.text


def test_create_author_with_empty_first_name_is_not_saved(client):
    response = client.post(
        "/catalog/author/create",
        data={"first_name": "", "family_name": "Rothfuss"},
        follow_redirects=False,
    )
    assert response.status_code == 200
    assert '<li data-field="first_name">First name must be specified.</li>' in response.text
    # what was typed comes back in the form
    assert 'value="Rothfuss"' in response.text
    assert "There are no authors." in client.get("/catalog/authors").text


def test_author_list_is_sorted_by_family_name(client, make_author):
    make_author("Terry", "Pratchett")
    make_author("Iain", "Banks")
    text = client.get("/catalog/authors").text
    assert text.index("Banks, Iain") < text.index("Pratchett, Terry")


def test_unknown_author_is_404(client):
    response = client.get("/catalog/author/doesnotexist")
    assert response.status_code == 404
    assert "Author not found" in response.text


def test_update_author_form_is_prefilled(client, make_author):
    author_id = make_author("Ursula", "LeGuin", date_of_birth="1929-10-21")
    response = client.get(f"/catalog/author/{author_id}/update")
    assert response.status_code == 200
    assert 'value="Ursula"' in response.text
    assert 'value="1929-10-21"' in response.text


def test_update_author(client, make_author, run_in_app):
    author_id = make_author("Ursula", "LeGuin")
    response = client.post(
        f"/catalog/author/{author_id}/update",
        data={"first_name": "Ursula", "family_name": "Guin", "date_of_death": "2018-01-22"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == f"/catalog/author/{author_id}"
    author = run_in_app(lambda db: get_author(db, author_id))
    assert author.family_name == "Guin"
    assert author.date_of_death_yyyy_mm_dd == "2018-01-22"


def test_update_author_with_errors_rerenders_form(client, make_author, run_in_app):
    author_id = make_author("Ursula", "LeGuin")
    response = client.post(
        f"/catalog/author/{author_id}/update",
        data={"first_name": "Ursula", "family_name": "", "date_of_birth": "yesterday"},
    )
    assert response.status_code == 200
    assert "Family name must be specified." in response.text
    assert "Invalid date of birth" in response.text
    assert run_in_app(lambda db: get_author(db, author_id)).family_name == "LeGuin"


def test_update_missing_author_is_404(client):
    response = client.post(
        "/catalog/author/missing/update",
        data={"first_name": "A", "family_name": "B"},
    )
    assert response.status_code == 404


def test_delete_author_with_books_is_blocked(client, make_author, make_book):
    author_id = make_author()
    make_book(author_id, title="The Name of the Wind")
    make_book(author_id, title="The Wise Mans Fear")

    response = client.post(f"/catalog/author/{author_id}/delete", follow_redirects=False)
    assert response.status_code == 200
    assert "Delete the following books" in response.text
    assert "The Name of the Wind" in response.text
    assert "The Wise Mans Fear" in response.text
    assert client.get(f"/catalog/author/{author_id}").status_code == 200


def test_delete_author_without_books(client, make_author):
    author_id = make_author()
    page = client.get(f"/catalog/author/{author_id}/delete")
    assert "Do you really want to delete this Author?" in page.text

    response = client.post(f"/catalog/author/{author_id}/delete", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/catalog/authors"
    assert client.get(f"/catalog/author/{author_id}").status_code == 404


def test_delete_page_for_missing_author_redirects_to_list(client):
    response = client.get("/catalog/author/missing/delete", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/catalog/authors"
