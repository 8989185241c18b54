"""Integration tests for the drafts HTTP API.

These tests use FastAPI's TestClient against an isolated store and check
status codes and payload shapes for each endpoint.
"""

ARIA = {"x-user-id": "writer-aria"}
JULES = {"x-user-id": "writer-jules"}
RONIN = {"x-user-id": "writer-ronin"}


def _create(client, headers=ARIA, **body):
    response = client.post("/drafts", json=body, headers=headers)
    assert response.status_code == 201
    return response.json()["draft"]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_uses_viewer_header_as_owner(client):
    draft = _create(client, headers=JULES, owner_id="writer-aria", title="Mine", content="<p>Hi</p>")
    assert draft["owner_id"] == "writer-jules"
    assert len(draft["revisions"]) == 1


def test_default_viewer_is_used_without_header(client):
    response = client.post("/drafts", json={"title": "Default"})
    assert response.status_code == 201
    assert response.json()["draft"]["owner_id"] == "writer-aria"


def test_invalid_visibility_is_rejected(client):
    response = client.post("/drafts", json={"title": "Bad", "visibility": "secret"}, headers=ARIA)
    assert response.status_code == 422


def test_list_returns_drafts_and_buckets(client):
    shared = _create(client, title="Shared", visibility="shared", shared_with=["writer-jules"])
    public = _create(client, title="Public", visibility="public")

    data = client.get("/drafts", headers=JULES).json()
    assert {d["id"] for d in data["drafts"]} == {shared["id"], public["id"]}
    assert [d["id"] for d in data["buckets"]["collaborating"]] == [shared["id"]]
    assert [d["id"] for d in data["buckets"]["public"]] == [public["id"]]
    assert data["buckets"]["owned"] == []
    assert "comments" not in data["drafts"][0]


def test_get_draft_status_codes(client):
    draft = _create(client, title="Secret")

    assert client.get(f"/drafts/{draft['id']}", headers=ARIA).status_code == 200

    forbidden = client.get(f"/drafts/{draft['id']}", headers=RONIN)
    assert forbidden.status_code == 403
    assert "authorised" in forbidden.json()["detail"]

    assert client.get("/drafts/draft-missing", headers=ARIA).status_code == 404


def test_patch_and_compare_versions(client):
    draft = _create(client, title="Test draft", content="<p>Hello world</p>")

    response = client.patch(
        f"/drafts/{draft['id']}",
        json={"content": "<p>Hello world</p><p>Added line</p>", "autosave": True},
        headers=ARIA,
    )
    assert response.status_code == 200
    revisions = response.json()["draft"]["revisions"]
    assert len(revisions) == 2
    assert revisions[1]["autosave"] is True
    assert revisions[1]["kind"] == "autosave"

    listed = client.get(f"/drafts/{draft['id']}/versions", headers=ARIA).json()["revisions"]
    assert [r["id"] for r in listed] == [r["id"] for r in revisions]

    comparison = client.get(
        f"/drafts/{draft['id']}/compare",
        params={"base": revisions[0]["id"], "target": revisions[1]["id"]},
        headers=ARIA,
    ).json()["comparison"]
    assert "added" in {s["type"] for s in comparison["segments"]}


def test_compare_requires_both_ids(client):
    draft = _create(client)
    response = client.get(f"/drafts/{draft['id']}/compare", params={"base": "x"}, headers=ARIA)
    assert response.status_code == 400


def test_compare_unknown_revision_is_not_found(client):
    draft = _create(client)
    revision_id = draft["revisions"][0]["id"]
    response = client.get(
        f"/drafts/{draft['id']}/compare",
        params={"base": revision_id, "target": "draft-revision-missing"},
        headers=ARIA,
    )
    assert response.status_code == 404


def test_patch_by_reader_is_forbidden(client):
    draft = _create(client, visibility="public")
    response = client.patch(f"/drafts/{draft['id']}", json={"title": "Hijacked"}, headers=RONIN)
    assert response.status_code == 403


def test_comment_endpoints(client):
    draft = _create(client, visibility="public")

    empty = client.post(f"/drafts/{draft['id']}/comments", json={"body": "  "}, headers=RONIN)
    assert empty.status_code == 400
    assert empty.json()["detail"] == "Comments require content"

    created = client.post(
        f"/drafts/{draft['id']}/comments",
        json={"body": "Sharp line", "placement": "inline", "quote": "Hello"},
        headers=RONIN,
    )
    assert created.status_code == 201
    assert created.json()["comment"]["placement"] == "inline"

    listed = client.get(f"/drafts/{draft['id']}/comments", headers=ARIA).json()
    assert [c["body"] for c in listed["comments"]] == ["Sharp line"]
    assert [c["body"] for c in listed["threads"]["inline"]] == ["Sharp line"]
    assert listed["threads"]["sidebar"] == []


def test_comment_on_private_draft_is_forbidden(client):
    draft = _create(client)
    response = client.post(f"/drafts/{draft['id']}/comments", json={"body": "Hi"}, headers=RONIN)
    assert response.status_code == 403


def test_collaborators_exclude_viewer(client):
    writers = client.get("/drafts/collaborators", headers=ARIA).json()["writers"]
    ids = [w["id"] for w in writers]
    assert "writer-aria" not in ids
    assert "writer-ronin" in ids


def test_event_stream_checks_access_before_streaming(client):
    draft = _create(client)

    assert client.get("/drafts/events").status_code == 400
    assert client.get("/drafts/events", params={"draftId": "draft-missing"}, headers=ARIA).status_code == 404
    assert client.get("/drafts/events", params={"draftId": draft["id"]}, headers=RONIN).status_code == 403
