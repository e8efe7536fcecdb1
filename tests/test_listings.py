from conftest import PUBLIC_DIR, PNG_BYTES, auth_header, create_listing, register, sign_in


def test_get_genres_returns_seeded_list(client):
    response = client.get("/api/get-genres")

    assert response.status_code == 200
    genres = response.json()
    assert genres[0] == {"genreId": 1, "name": "Rock"}
    assert len(genres) == 10


def test_get_genre_by_id(client):
    response = client.get("/api/genre/3")

    assert response.status_code == 200
    assert response.json() == {"name": "Jazz"}


def test_get_genre_invalid_and_missing_ids(client):
    assert client.get("/api/genre/0").status_code == 400
    assert client.get("/api/genre/abc").status_code == 400
    response = client.get("/api/genre/999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Cannot find genre with genreId: 999"


def test_create_listing_without_token(client):
    before = set((PUBLIC_DIR / "images").iterdir())

    response = client.post(
        "/api/create-listing",
        data={"artist": "Queen", "album": "Jazz", "genre": "1", "condition": "VG", "price": "10", "info": ""},
        files={"image": ("cover.png", PNG_BYTES, "image/png")},
    )

    assert response.status_code == 401
    assert set((PUBLIC_DIR / "images").iterdir()) == before


def test_create_listing_owned_by_token_user(client, alice):
    response = create_listing(client, alice["token"])

    assert response.status_code == 201
    record = response.json()
    assert record["sellerId"] == alice["user"]["userId"]
    assert record["artist"] == "Queen"
    assert record["albumName"] == "News of the World"
    assert record["genreId"] == 1
    assert record["price"] == 20
    assert record["imageSrc"].startswith("/images/image-")
    assert record["imageSrc"].endswith(".png")


def test_uploaded_image_is_served(client, listing):
    response = client.get(listing["imageSrc"])

    assert response.status_code == 200
    assert response.content == PNG_BYTES


def test_create_listing_requires_image(client, alice):
    response = client.post(
        "/api/create-listing",
        data={"artist": "Queen", "album": "Jazz", "genre": "1", "condition": "VG", "price": "10", "info": ""},
        headers=auth_header(alice["token"]),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "image is required"


def test_create_listing_rejects_non_image_upload(client, alice):
    response = client.post(
        "/api/create-listing",
        data={"artist": "Queen", "album": "Jazz", "genre": "1", "condition": "VG", "price": "10", "info": ""},
        files={"image": ("notes.txt", b"hello", "text/plain")},
        headers=auth_header(alice["token"]),
    )

    assert response.status_code == 400


def test_create_listing_unknown_genre_discards_upload(client, alice):
    before = set((PUBLIC_DIR / "images").iterdir())

    response = create_listing(client, alice["token"], genre="999")

    assert response.status_code == 400
    assert set((PUBLIC_DIR / "images").iterdir()) == before


def test_all_products_lists_every_record(client, alice):
    create_listing(client, alice["token"])
    create_listing(client, alice["token"], artist="Miles Davis", album="Kind of Blue", genre="3")

    response = client.get("/api/all-products")

    assert response.status_code == 200
    records = response.json()
    assert [r["artist"] for r in records] == ["Queen", "Miles Davis"]


def test_get_product_invalid_ids(client):
    for bad in ("0", "abc", "-1", "1.5"):
        response = client.get(f"/api/products/{bad}")
        assert response.status_code == 400, bad
        assert response.json()["detail"] == "recordId must be a positive integer"


def test_get_product_missing_id(client):
    response = client.get("/api/products/999999")

    assert response.status_code == 404
    assert response.json()["detail"] == "Cannot find record with recordId: 999999"


def test_listing_end_to_end(client):
    register(client, "alice", "pw1")
    token = sign_in(client, "alice", "pw1")["token"]

    created = create_listing(client, token)
    assert created.status_code == 201
    record_id = created.json()["recordId"]

    response = client.get(f"/api/products/{record_id}")

    assert response.status_code == 200
    product = response.json()
    assert product["artist"] == "Queen"
    assert product["albumName"] == "News of the World"
    assert product["genre"] == "Rock"
    assert product["genreId"] == 1


def test_ids_beyond_integer_column_are_not_found(client):
    assert client.get("/api/products/99999999999").status_code == 404
    assert client.get("/api/genre/99999999999").status_code == 404


def test_database_failure_is_generic_500_and_discards_upload(quiet_client, monkeypatch):
    register(quiet_client, "alice", "pw1")
    token = sign_in(quiet_client, "alice", "pw1")["token"]
    before = set((PUBLIC_DIR / "images").iterdir())

    async def failing_create_record(*args, **kwargs):
        raise RuntimeError("connection to server lost: secret internals")

    monkeypatch.setattr("recordshop.main.create_record", failing_create_record)

    response = create_listing(quiet_client, token)

    assert response.status_code == 500
    assert response.json() == {"detail": "an unexpected error occurred"}
    assert "internals" not in response.text
    assert set((PUBLIC_DIR / "images").iterdir()) == before
