# tests/test_editorials.py


def today_editorials(client, headers=None, **params):
    response = client.get("/api/editorials/today", headers=headers or {}, params=params)
    assert response.status_code == 200
    return response.json()["data"]


def test_today_lists_seeded_editorials(client, seeded):
    editorials = today_editorials(client)
    assert len(editorials) == 2
    assert {e["source"] for e in editorials} == {"The Hindu", "Indian Express"}
    assert all(e["isRead"] is False and e["isSaved"] is False for e in editorials)


def test_source_filter(client, seeded):
    assert [e["source"] for e in today_editorials(client, source="The Hindu")] == ["The Hindu"]
    assert len(today_editorials(client, source="all")) == 2
    assert today_editorials(client, source="Mint") == []


def test_detail_renders_markdown(client, seeded):
    editorial_id = today_editorials(client, source="The Hindu")[0]["id"]

    data = client.get(f"/api/editorials/{editorial_id}").json()["data"]
    assert data["title"] == "Rethinking fiscal federalism"
    assert "<h2>Context</h2>" in data["contentHtml"]


def test_unknown_editorial(client, auth_headers):
    assert client.get("/api/editorials/missing").json()["message"] == "Editorial not found"
    assert client.post("/api/editorials/missing/mark-read", headers=auth_headers).status_code == 404
    assert client.post("/api/editorials/missing/save", headers=auth_headers).status_code == 404


def test_mark_read_and_stats(client, seeded, auth_headers):
    editorial_id = today_editorials(client)[0]["id"]

    response = client.post(f"/api/editorials/{editorial_id}/mark-read", headers=auth_headers)
    assert response.json() == {"status": "success", "message": "Marked as read"}
    # idempotent
    client.post(f"/api/editorials/{editorial_id}/mark-read", headers=auth_headers)

    listed = {e["id"]: e for e in today_editorials(client, auth_headers)}
    assert listed[editorial_id]["isRead"] is True

    stats = client.get("/api/editorials/stats", headers=auth_headers).json()["data"]
    assert stats["totalRead"] == 1
    assert stats["weeklyRead"] == 1
    assert stats["weeklyTarget"] == 7
    assert stats["totalSaved"] == 0
    assert stats["streak"] == 0


def test_save_toggles(client, seeded, auth_headers, other_headers):
    editorial_id = today_editorials(client)[0]["id"]
    url = f"/api/editorials/{editorial_id}/save"

    assert client.post(url, headers=auth_headers).json()["data"] == {"saved": True}
    listed = {e["id"]: e for e in today_editorials(client, auth_headers)}
    assert listed[editorial_id]["isSaved"] is True
    # bookmarks are per user
    listed = {e["id"]: e for e in today_editorials(client, other_headers)}
    assert listed[editorial_id]["isSaved"] is False

    assert client.post(url, headers=auth_headers).json()["data"] == {"saved": False}


def test_summary_is_cached(client, seeded, auth_headers):
    editorial_id = today_editorials(client, source="Indian Express")[0]["id"]
    url = f"/api/editorials/{editorial_id}/summarize"

    first = client.post(url, headers=auth_headers).json()["data"]["summary"]
    assert first.startswith('Key Points from "Heatwaves and urban resilience"')
    assert "Environment" in first

    second = client.post(url, headers=auth_headers).json()["data"]["summary"]
    assert second == first

    detail = client.get(f"/api/editorials/{editorial_id}").json()["data"]
    assert detail["aiSummary"] == first
