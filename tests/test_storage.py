from __future__ import annotations


def submit(api, board_id: str, user_id: str, score: int, **fields):
    payload = {
        "user_id": user_id,
        "username": fields.pop("username", user_id.title()),
        "score": score,
        "last_active_at": "2024-01-15T00:00:00Z",
        **fields,
    }
    return api.post(f"/v1/boards/{board_id}/entries", json=payload)


def seed_board(api, board_id: str):
    players = [("alice", 300, "US"), ("bob", 250, "CA"), ("cara", 200, "US"), ("dan", 150, None)]
    for user_id, score, country in players:
        resp = submit(api, board_id, user_id, score, country=country)
        assert resp.status_code == 200


def test_submitted_entries_are_served_in_rank_order(client):
    api, _, board_id = client
    seed_board(api, board_id)

    response = api.get(f"/v1/boards/{board_id}/leaderboard", params={"limit": 10})
    assert response.status_code == 200

    body = response.json()
    assert [row["user_id"] for row in body["data"]] == ["alice", "bob", "cara", "dan"]
    assert [row["rank"] for row in body["data"]] == [1, 2, 3, 4]
    assert body["filters"]["available"]["countries"] == ["CA", "US"]


def test_resubmitting_replaces_the_entry(client):
    api, sync_redis, board_id = client
    seed_board(api, board_id)

    resp = submit(api, board_id, "dan", 999, username="Dan the Man")
    assert resp.status_code == 200
    assert resp.json()["rank"] is None

    top = api.get(f"/v1/boards/{board_id}/leaderboard", params={"limit": 1}).json()
    assert top["data"][0]["username"] == "Dan the Man"
    assert sync_redis.zscore(f"lb:{board_id}", "dan") == 999


def test_remove_entry(client):
    api, _, board_id = client
    seed_board(api, board_id)

    removed = api.delete(f"/v1/boards/{board_id}/entries/bob")
    assert removed.status_code == 204

    missing = api.delete(f"/v1/boards/{board_id}/entries/bob")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "ENTRY_NOT_FOUND"

    search = api.get(f"/v1/boards/{board_id}/search", params={"q": "bob"}).json()
    assert search["results"] == []


def test_cursor_walk_over_stored_board(client):
    api, _, board_id = client
    seed_board(api, board_id)

    first = api.get(f"/v1/boards/{board_id}/leaderboard/cursor", params={"limit": 3}).json()
    rest = api.get(
        f"/v1/boards/{board_id}/leaderboard/cursor",
        params={"limit": 3, "cursor": first["next_cursor"]},
    ).json()

    assert [row["user_id"] for row in first["data"] + rest["data"]] == ["alice", "bob", "cara", "dan"]
    assert rest["has_next"] is False


def test_empty_board(client):
    api, _, board_id = client

    response = api.get(f"/v1/boards/{board_id}/leaderboard")
    assert response.status_code == 200

    body = response.json()
    assert body["data"] == []
    assert body["meta"]["total"] == 0
    assert body["meta"]["total_pages"] == 0
    assert body["filters"]["available"]["score_range"] == {"min": 0, "max": 0}


def test_readyz_checks_redis(client):
    api, _, _ = client

    response = api.get("/v1/readyz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_best_mode_ignores_lower_score(client):
    api, _, board_id = client

    first = submit(api, board_id, "alice", 100, mode="best")
    second = submit(api, board_id, "alice", 90, mode="best", username="Lower")

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json()["score"] == 100
    assert second.json()["username"] == "Alice"


def test_best_mode_updates_higher_score(client):
    api, _, board_id = client

    submit(api, board_id, "alice", 100)
    higher = submit(api, board_id, "alice", 120)

    assert higher.status_code == 200
    assert higher.json()["score"] == 120


def test_latest_mode_overwrites(client):
    api, sync_redis, board_id = client

    submit(api, board_id, "alice", 100, mode="best")
    latest = submit(api, board_id, "alice", 80, mode="latest")

    assert latest.status_code == 200
    assert latest.json()["score"] == 80
    assert sync_redis.zscore(f"lb:{board_id}", "alice") == 80


def test_get_entry(client):
    api, _, board_id = client
    seed_board(api, board_id)

    found = api.get(f"/v1/boards/{board_id}/entries/cara")
    assert found.status_code == 200
    assert found.json()["score"] == 200
    assert found.json()["country"] == "US"

    missing = api.get(f"/v1/boards/{board_id}/entries/zoe")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "ENTRY_NOT_FOUND"
