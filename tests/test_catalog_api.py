from decimal import Decimal

import pytest


def _book_payload(genre_id, **overrides):
    payload = {
        "title": "Designing Data-Intensive Applications",
        "writer": "Martin Kleppmann",
        "publisher": "O'Reilly",
        "publication_year": 2017,
        "description": "Storage, replication and stream processing",
        "price": "45.00",
        "stock_quantity": 7,
        "genre_id": genre_id,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def genre(client, auth):
    r = client.post("/genre", json={"name": "Databases"}, headers=auth)
    assert r.status_code == 201
    return r.json()["data"]


def test_health_check(client):
    r = client.get("/health-check")
    assert r.status_code == 200
    assert r.json()["success"] is True


def test_unknown_endpoint_uses_envelope(client):
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Endpoint not found", "data": None}


def test_user_registration_is_idempotent_on_email(client):
    first = client.post("/users", json={"email": "ann@example.com", "username": "ann"})
    again = client.post("/users", json={"email": "ann@example.com"})
    assert first.status_code == 201
    assert again.json()["data"]["id"] == first.json()["data"]["id"]

    me = client.get("/users/me", headers={"X-User-Id": str(first.json()["data"]["id"])})
    assert me.json()["data"]["email"] == "ann@example.com"


def test_create_and_get_book(client, auth, genre):
    r = client.post("/books", json=_book_payload(genre["id"]), headers=auth)
    assert r.status_code == 201
    book = r.json()["data"]
    assert book["genre"] == {"id": genre["id"], "name": "Databases"}
    assert Decimal(book["price"]) == Decimal("45.00")

    r = client.get(f"/books/{book['id']}")
    assert r.status_code == 200
    assert r.json()["data"]["title"] == "Designing Data-Intensive Applications"


def test_create_book_requires_identity(client, genre):
    r = client.post("/books", json=_book_payload(genre["id"]))
    assert r.status_code == 401


def test_create_book_rejects_duplicate_title_and_unknown_genre(client, auth, genre):
    client.post("/books", json=_book_payload(genre["id"]), headers=auth)

    r = client.post("/books", json=_book_payload(genre["id"]), headers=auth)
    assert r.status_code == 400
    assert r.json()["message"] == "Book with this title already exists"

    r = client.post("/books", json=_book_payload(999, title="Other"), headers=auth)
    assert r.status_code == 404
    assert r.json()["message"] == "Genre not found"


def test_duplicate_title_lost_race_maps_to_400(client, auth, genre, monkeypatch):
    from bookshop.repos.book_repo import BookRepo

    # obie prosby przechodza sprawdzenie tytulu, decyduje unique w bazie
    monkeypatch.setattr(BookRepo, "get_book_by_title", lambda self, title: None)
    first = client.post("/books", json=_book_payload(genre["id"]), headers=auth)
    second = client.post("/books", json=_book_payload(genre["id"]), headers=auth)

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json()["success"] is False
    assert second.json()["message"] == "Book with this title already exists"

    listing = client.get("/books").json()["data"]
    assert listing["pagination"]["total"] == 1


def test_duplicate_genre_lost_race_maps_to_400(client, auth, monkeypatch):
    from bookshop.repos.genre_repo import GenreRepo

    monkeypatch.setattr(GenreRepo, "get_genre_by_name", lambda self, name: None)
    first = client.post("/genre", json={"name": "Poetry"}, headers=auth)
    second = client.post("/genre", json={"name": "Poetry"}, headers=auth)

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json()["message"] == "Genre with this name already exists"

    other = client.post("/genre", json={"name": "Drama"}, headers=auth).json()["data"]
    r = client.patch(f"/genre/{other['id']}", json={"name": "Poetry"}, headers=auth)
    assert r.status_code == 400
    assert r.json()["message"] == "Genre with this name already exists"


def test_create_book_rejects_out_of_range_genre_id(client, auth, genre):
    r = client.post("/books", json=_book_payload(2**63), headers=auth)
    assert r.status_code == 400
    assert r.json()["success"] is False


@pytest.mark.parametrize("overrides", [
    {"price": "0"},
    {"stock_quantity": -1},
    {"publication_year": 999},
    {"publication_year": 3000},
    {"title": ""},
])
def test_create_book_validation(client, auth, genre, overrides):
    r = client.post("/books", json=_book_payload(genre["id"], **overrides), headers=auth)
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_list_books_filters_sorts_and_paginates(client, make_genre, make_book):
    tech = make_genre("Tech")
    poetry = make_genre("Poetry")
    make_book("Python Tricks", price="20.00", genre=tech, writer="Dan Bader")
    make_book("Fluent Python", price="55.00", genre=tech, writer="Luciano Ramalho")
    make_book("Leaves of Grass", price="9.00", genre=poetry, writer="Walt Whitman")

    r = client.get("/books", params={"search": "python", "sort_by": "price", "sort_order": "asc"})
    data = r.json()["data"]
    assert [b["title"] for b in data["books"]] == ["Python Tricks", "Fluent Python"]
    assert data["pagination"]["total"] == 2

    r = client.get("/books", params={"min_price": "10", "max_price": "30"})
    assert [b["title"] for b in r.json()["data"]["books"]] == ["Python Tricks"]

    r = client.get("/books", params={"genre_id": poetry.id})
    assert [b["title"] for b in r.json()["data"]["books"]] == ["Leaves of Grass"]

    r = client.get("/books", params={"limit": 2, "page": 2, "sort_by": "title", "sort_order": "asc"})
    data = r.json()["data"]
    assert [b["title"] for b in data["books"]] == ["Python Tricks"]
    assert data["pagination"] == {
        "page": 2, "limit": 2, "total": 3, "total_pages": 2, "has_next": False, "has_prev": True,
    }


def test_list_books_by_genre(client, make_genre, make_book):
    tech = make_genre("Tech")
    make_book("Python Tricks", genre=tech)
    make_book("Elsewhere")

    r = client.get(f"/books/genre/{tech.id}")
    data = r.json()["data"]
    assert data["genre"] == {"id": tech.id, "name": "Tech"}
    assert [b["title"] for b in data["books"]] == ["Python Tricks"]

    assert client.get("/books/genre/999").status_code == 404


def test_update_book(client, auth, make_genre, make_book):
    book = make_book("Old Title", price="10.00", stock=3)
    make_book("Taken Title")
    other = make_genre("Other")

    r = client.patch(
        f"/books/{book.id}",
        json={"title": "New Title", "stock_quantity": 12, "genre_id": other.id},
        headers=auth,
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["title"] == "New Title"
    assert data["stock_quantity"] == 12
    assert data["genre"]["name"] == "Other"

    r = client.patch(f"/books/{book.id}", json={"title": "Taken Title"}, headers=auth)
    assert r.status_code == 400

    r = client.patch(f"/books/{book.id}", json={"stock_quantity": -5}, headers=auth)
    assert r.status_code == 400


def test_soft_deleted_book_disappears_and_cannot_be_ordered(client, auth, make_book, stock_of):
    book = make_book("Gone Soon", stock=4)

    r = client.delete(f"/books/{book.id}", headers=auth)
    assert r.status_code == 200
    assert r.json()["message"] == "Book deleted successfully"

    assert client.get(f"/books/{book.id}").status_code == 404
    assert client.get("/books").json()["data"]["books"] == []
    assert client.delete(f"/books/{book.id}", headers=auth).status_code == 404

    r = client.post("/transactions", json={"items": [{"book_id": book.id, "quantity": 1}]}, headers=auth)
    assert r.status_code == 404
    assert stock_of(book.id) == 4


def test_genre_crud(client, auth, genre):
    r = client.post("/genre", json={"name": "Databases"}, headers=auth)
    assert r.status_code == 400
    assert r.json()["message"] == "Genre with this name already exists"

    r = client.post("/genre", json={"name": " x "}, headers=auth)
    assert r.status_code == 400

    r = client.patch(f"/genre/{genre['id']}", json={"name": "Data Systems"}, headers=auth)
    assert r.status_code == 200
    assert r.json()["data"]["name"] == "Data Systems"

    r = client.get(f"/genre/{genre['id']}")
    assert r.json()["data"] == {"id": genre["id"], "name": "Data Systems"}


def test_list_genres_with_meta(client, auth):
    for name in ("Alpha", "Beta", "Gamma"):
        client.post("/genre", json={"name": name}, headers=auth)

    r = client.get("/genre", params={"limit": 2, "sort_order": "asc"})
    body = r.json()
    assert [g["name"] for g in body["data"]] == ["Alpha", "Beta"]
    assert body["meta"] == {"page": 1, "limit": 2, "prev_page": None, "next_page": 2}

    r = client.get("/genre", params={"search": "amm"})
    assert [g["name"] for g in r.json()["data"]] == ["Gamma"]


def test_genre_with_active_books_cannot_be_deleted(client, auth, make_genre, make_book):
    genre = make_genre("Busy")
    book = make_book("Still Here", genre=genre)

    r = client.delete(f"/genre/{genre.id}", headers=auth)
    assert r.status_code == 400
    assert r.json()["data"]["book_count"] == 1

    client.delete(f"/books/{book.id}", headers=auth)
    r = client.delete(f"/genre/{genre.id}", headers=auth)
    assert r.status_code == 200
    assert client.get(f"/genre/{genre.id}").status_code == 404


def test_seed_populates_empty_database_once(client):
    from bookshop.data.seed import seed

    seed()
    seed()

    data = client.get("/books", params={"limit": 50}).json()["data"]
    assert data["pagination"]["total"] == 4
    assert len(client.get("/genre").json()["data"]) == 3
