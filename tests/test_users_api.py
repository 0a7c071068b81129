from __future__ import annotations

import pytest

from app.core.config import get_settings


async def _create(client, name, nickname, likes=0, viewers=0):
    return await client.post(
        "/users",
        json={"name": name, "nickname": nickname, "likes": likes, "viewers": viewers},
    )


@pytest.mark.asyncio
async def test_create_then_get_returns_rating(app_client):
    r = await _create(app_client, "Ann", "ann1", 3, 10)
    assert r.status_code == 201
    body = r.json()
    assert body["nickname"] == "ann1"
    assert body["rating"] == pytest.approx(0.3)
    assert isinstance(body["id"], int)

    r = await app_client.get("/users/ann1")
    assert r.status_code == 200
    assert r.json() == body


@pytest.mark.asyncio
async def test_create_defaults_counters_to_zero(app_client):
    r = await app_client.post("/users", json={"name": "New", "nickname": "new"})
    assert r.status_code == 201
    assert r.json()["likes"] == 0
    assert r.json()["viewers"] == 0
    assert r.json()["rating"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"name": "", "nickname": "x"},
        {"name": "X", "nickname": "   "},
        {"name": "X", "nickname": "x", "likes": -1},
        {"name": "X", "nickname": "x", "likes": 5, "viewers": 4},
    ],
)
async def test_create_invalid_input_is_400(app_client, payload):
    r = await app_client.post("/users", json=payload)
    assert r.status_code == 400
    assert "detail" in r.json()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"name": "X", "nickname": "x", "likes": "many"},
        {"name": "X", "nickname": "x", "likes": True, "viewers": 10},
        {"name": "X", "nickname": "x", "likes": 1, "viewers": "10"},
        {"name": "X", "nickname": "x", "likes": 1.0, "viewers": 10},
        {"name": 7, "nickname": "x"},
    ],
)
async def test_create_wrong_json_type_is_422_and_not_coerced(app_client, payload):
    r = await app_client.post("/users", json=payload)
    assert r.status_code == 422
    assert (await app_client.get("/users/x")).status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"viewers": 12.0}, {"likes": True}, {"viewers": "12"}])
async def test_patch_wrong_json_type_is_422_and_unchanged(app_client, payload):
    await _create(app_client, "Ann", "ann1", 3, 10)

    r = await app_client.patch("/users/ann1", json=payload)
    assert r.status_code == 422

    body = (await app_client.get("/users/ann1")).json()
    assert (body["likes"], body["viewers"]) == (3, 10)


@pytest.mark.asyncio
async def test_counters_beyond_integer_column_are_rejected(app_client):
    r = await _create(app_client, "Big", "big", 2**63, 2**63)
    assert r.status_code in (400, 422)

    r = await _create(app_client, "Big", "big", 0, 2_147_483_648)
    assert r.status_code == 400

    r = await _create(app_client, "Max", "max", 2_147_483_647, 2_147_483_647)
    assert r.status_code == 201
    assert r.json()["rating"] == 1.0

    r = await app_client.patch("/users/max", json={"viewers": 2**63})
    assert r.status_code in (400, 422)


@pytest.mark.asyncio
async def test_duplicate_nickname_is_409_and_first_wins(app_client):
    assert (await _create(app_client, "Ann", "ann1")).status_code == 201

    r = await _create(app_client, "Another Ann", "ann1", 1, 1)
    assert r.status_code == 409
    assert r.json() == {"detail": "nickname already exists"}

    r = await app_client.get("/users/ann1")
    assert r.json()["name"] == "Ann"


@pytest.mark.asyncio
async def test_get_unknown_is_404(app_client):
    r = await app_client.get("/users/ghost")
    assert r.status_code == 404
    assert r.json() == {"detail": "user not found"}


@pytest.mark.asyncio
async def test_patch_likes_above_viewers_is_400_and_unchanged(app_client):
    await _create(app_client, "Ann", "ann1", 3, 10)

    r = await app_client.patch("/users/ann1", json={"likes": 12})
    assert r.status_code == 400
    assert r.json() == {"detail": "likes cannot be more than viewers"}

    assert (await app_client.get("/users/ann1")).json()["likes"] == 3


@pytest.mark.asyncio
async def test_patch_updates_only_supplied_fields(app_client):
    await _create(app_client, "Ann", "ann1", 3, 10)

    r = await app_client.patch("/users/ann1", json={"likes": 5})
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}

    body = (await app_client.get("/users/ann1")).json()
    assert body["name"] == "Ann"
    assert body["likes"] == 5
    assert body["viewers"] == 10
    assert body["rating"] == pytest.approx(0.5)


@pytest.mark.asyncio
async def test_patch_rename_moves_user(app_client):
    await _create(app_client, "Ann", "ann1", 1, 2)

    r = await app_client.patch("/users/ann1", json={"nickname": "ann2"})
    assert r.status_code == 200

    assert (await app_client.get("/users/ann1")).status_code == 404
    assert (await app_client.get("/users/ann2")).json()["likes"] == 1


@pytest.mark.asyncio
async def test_patch_rename_conflict_is_409(app_client):
    await _create(app_client, "Ann", "ann1")
    await _create(app_client, "Bob", "bob")

    r = await app_client.patch("/users/bob", json={"nickname": "ann1"})
    assert r.status_code == 409
    assert (await app_client.get("/users/bob")).status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"likes": None}, {"name": ""}])
async def test_patch_empty_or_null_is_400(app_client, payload):
    await _create(app_client, "Ann", "ann1", 1, 2)

    r = await app_client.patch("/users/ann1", json=payload)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_patch_unknown_user_is_404(app_client):
    r = await app_client.patch("/users/ghost", json={"name": "Casper"})
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_patch_viewers_decrease_rejected_when_monotonic(app_client):
    await _create(app_client, "Ann", "ann1", 3, 10)

    r = await app_client.patch("/users/ann1", json={"viewers": 8})
    assert r.status_code == 400
    assert r.json() == {"detail": "viewers cannot be less than previous value"}
    assert (await app_client.get("/users/ann1")).json()["viewers"] == 10


@pytest.mark.asyncio
async def test_patch_viewers_decrease_allowed_when_not_monotonic(app_client, monkeypatch):
    monkeypatch.setenv("VIEWERS_MONOTONIC", "false")
    get_settings.cache_clear()
    await _create(app_client, "Ann", "ann1", 3, 10)

    r = await app_client.patch("/users/ann1", json={"viewers": 8})
    assert r.status_code == 200

    r = await app_client.patch("/users/ann1", json={"viewers": 2})
    assert r.status_code == 400
    assert r.json() == {"detail": "viewers cannot be less than likes"}


@pytest.mark.asyncio
async def test_delete_twice_is_204_then_404(app_client):
    await _create(app_client, "Ann", "ann1")

    r = await app_client.delete("/users/ann1")
    assert r.status_code == 204
    assert r.content == b""

    r = await app_client.delete("/users/ann1")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_list_sorting(app_client):
    for nickname, likes, viewers in [("a", 1, 2), ("b", 9, 10), ("c", 2, 4), ("d", 0, 0)]:
        await _create(app_client, nickname.upper(), nickname, likes, viewers)

    desc = (await app_client.get("/users", params={"sort": "desc"})).json()
    ratings = [u["rating"] for u in desc["data"]]
    assert ratings == sorted(ratings, reverse=True)
    assert [u["nickname"] for u in desc["data"]] == ["b", "a", "c", "d"]

    asc = (await app_client.get("/users", params={"sort": "asc"})).json()
    ratings = [u["rating"] for u in asc["data"]]
    assert ratings == sorted(ratings)

    plain = (await app_client.get("/users")).json()
    assert [u["nickname"] for u in plain["data"]] == ["a", "b", "c", "d"]


@pytest.mark.asyncio
@pytest.mark.parametrize("sort", ["up", "DESC", "rating"])
async def test_list_invalid_sort_is_400(app_client, sort):
    r = await app_client.get("/users", params={"sort": sort})
    assert r.status_code == 400
    assert "invalid sort" in r.json()["detail"]


@pytest.mark.asyncio
async def test_list_paging_reports_total(app_client):
    for i in range(5):
        await _create(app_client, f"U{i}", f"u{i}", 0, i)

    r = await app_client.get("/users", params={"page": 2, "page_size": 2})
    assert r.status_code == 200
    body = r.json()
    assert [u["nickname"] for u in body["data"]] == ["u2", "u3"]
    assert body["total_count"] == 5
    assert body["limit"] == 2
    assert body["offset"] == 2
    assert body["has_more"] is True

    last = (await app_client.get("/users", params={"page": 3, "page_size": 2})).json()
    assert [u["nickname"] for u in last["data"]] == ["u4"]
    assert last["has_more"] is False


@pytest.mark.asyncio
async def test_list_empty_store(app_client):
    r = await app_client.get("/users")
    assert r.status_code == 200
    body = r.json()
    assert body["data"] == []
    assert body["total_count"] == 0
    assert body["limit"] == 20


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [
        {"page": 0},
        {"page": -1},
        {"page_size": 0},
        {"page_size": 101},
        {"page": 2**62, "page_size": 100},
    ],
)
async def test_list_invalid_paging_is_400(app_client, params):
    r = await app_client.get("/users", params=params)
    assert r.status_code == 400
