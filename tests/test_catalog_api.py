import pytest


@pytest.fixture()
def author(client, admin_headers):
    resp = client.post(
        "/api/v1/authors",
        json={"name": "Isaac Asimov", "biography": "Science fiction writer", "birthDate": "1920-01-02"},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    return resp.get_json()["data"]


@pytest.fixture()
def category(client, admin_headers):
    resp = client.post("/api/v1/categories", json={"name": "Science Fiction"}, headers=admin_headers)
    assert resp.status_code == 201
    return resp.get_json()["data"]


@pytest.fixture()
def book(client, admin_headers, author, category):
    resp = client.post(
        "/api/v1/books",
        json={
            "title": "Foundation",
            "description": "First volume",
            "publishedDate": "1951-06-01",
            "authorId": author["id"],
            "categoryId": category["id"],
        },
        headers=admin_headers,
    )
    assert resp.status_code == 201
    return resp.get_json()["data"]


def test_catalog_reads_are_public(client, book):
    assert client.get("/api/v1/books").status_code == 200
    assert client.get(f"/api/v1/books/{book['id']}").status_code == 200
    assert client.get("/api/v1/authors").status_code == 200
    assert client.get("/api/v1/categories").status_code == 200


def test_writes_require_authentication(client):
    resp = client.post("/api/v1/authors", json={"name": "Someone"})
    assert resp.status_code == 401


def test_writes_require_admin_role(client, user_headers):
    resp = client.post("/api/v1/categories", json={"name": "Poetry"}, headers=user_headers)
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "FORBIDDEN"


def test_book_is_returned_with_author_and_category(client, book, author, category):
    assert book["available"] is True
    assert book["publishedDate"] == "1951-06-01"
    assert book["author"] == {"id": author["id"], "name": "Isaac Asimov"}
    assert book["category"] == {"id": category["id"], "name": "Science Fiction"}

    detail = client.get(f"/api/v1/authors/{author['id']}").get_json()["data"]
    assert [b["id"] for b in detail["books"]] == [book["id"]]


def test_create_book_with_unknown_author_is_rejected(client, admin_headers, category):
    resp = client.post(
        "/api/v1/books",
        json={"title": "Orphan", "authorId": "missing", "categoryId": category["id"]},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "authorId not found"


def test_create_book_rejects_future_publication_date(client, admin_headers, author, category):
    resp = client.post(
        "/api/v1/books",
        json={
            "title": "Tomorrow",
            "publishedDate": "2999-01-01",
            "authorId": author["id"],
            "categoryId": category["id"],
        },
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert "publishedDate" in resp.get_json()["details"]


def test_update_book_changes_fields_and_category(client, admin_headers, book):
    other = client.post("/api/v1/categories", json={"name": "Classics"}, headers=admin_headers).get_json()["data"]
    resp = client.put(
        f"/api/v1/books/{book['id']}",
        json={"available": False, "categoryId": other["id"], "title": "Foundation (1951)"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["available"] is False
    assert data["title"] == "Foundation (1951)"
    assert data["category"]["name"] == "Classics"


def test_list_books_filters_and_paginates(client, admin_headers, author, category, book):
    client.post(
        "/api/v1/books",
        json={"title": "I, Robot", "available": False, "authorId": author["id"], "categoryId": category["id"]},
        headers=admin_headers,
    )

    body = client.get("/api/v1/books?limit=1&sort=-title").get_json()
    assert body["meta"]["total"] == 2
    assert [b["title"] for b in body["data"]] == ["I, Robot"]

    available = client.get("/api/v1/books?available=true").get_json()["data"]
    assert [b["title"] for b in available] == ["Foundation"]

    found = client.get("/api/v1/books?q=robot").get_json()["data"]
    assert [b["title"] for b in found] == ["I, Robot"]


def test_list_books_rejects_unknown_sort_field(client):
    resp = client.get("/api/v1/books?sort=price")
    assert resp.status_code == 400


def test_unknown_ids_are_not_found(client, admin_headers):
    assert client.get("/api/v1/books/missing").status_code == 404
    assert client.get("/api/v1/authors/missing").status_code == 404
    assert client.delete("/api/v1/categories/missing", headers=admin_headers).status_code == 404


def test_duplicate_category_name_is_rejected(client, admin_headers, category):
    resp = client.post("/api/v1/categories", json={"name": "science fiction"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "CONFLICT"


def test_author_with_books_cannot_be_deleted(client, admin_headers, author, book):
    resp = client.delete(f"/api/v1/authors/{author['id']}", headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "CONFLICT"

    assert client.delete(f"/api/v1/books/{book['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/v1/authors/{author['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/v1/authors/{author['id']}").status_code == 404


def test_update_author(client, admin_headers, author):
    resp = client.put(
        f"/api/v1/authors/{author['id']}",
        json={"biography": "Prolific author"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["biography"] == "Prolific author"
    assert data["name"] == "Isaac Asimov"


def test_discovery_routes(client):
    assert client.get("/").status_code == 200
    assert client.get("/api/v1/health").get_json()["status"] == "ok"
    assert "books" in client.get("/api/v1").get_json()["endpoints"]


def test_blank_names_and_titles_are_rejected(client, admin_headers, author, category):
    resp = client.post("/api/v1/authors", json={"name": "   "}, headers=admin_headers)
    assert resp.status_code == 400
    assert "name" in resp.get_json()["details"]

    resp = client.post("/api/v1/categories", json={"name": "   "}, headers=admin_headers)
    assert resp.status_code == 400
    assert "name" in resp.get_json()["details"]

    resp = client.post(
        "/api/v1/books",
        json={"title": "   ", "authorId": author["id"], "categoryId": category["id"]},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert "title" in resp.get_json()["details"]


def test_blank_name_on_update_is_rejected(client, admin_headers, author):
    resp = client.put(f"/api/v1/authors/{author['id']}", json={"name": " "}, headers=admin_headers)
    assert resp.status_code == 400
    assert client.get(f"/api/v1/authors/{author['id']}").get_json()["data"]["name"] == "Isaac Asimov"


def test_page_beyond_offset_range_is_rejected(client):
    resp = client.get("/api/v1/books?page=999999999999999999999&limit=5")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "VALIDATION_ERROR"


def test_page_past_the_end_is_empty(client, book):
    body = client.get("/api/v1/books?page=50&limit=5").get_json()
    assert body["data"] == []
    assert body["meta"]["total"] == 1
