"""API tests through FastAPI's TestClient."""

import json

import pytest
from fastapi.testclient import TestClient

from adventure_book.app import create_app
from adventure_book.editor import PassageEditor


@pytest.fixture
def client(tmp_path) -> TestClient:
    return TestClient(create_app(tmp_path / "data"))


@pytest.fixture
def story_id(client, sample_document) -> str:
    storage = client.app.state.storage
    return storage.create_story("The Cave", json.dumps(sample_document))


# ── Health & settings ───────────────────────────────────────


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_settings_round_trip(client):
    assert client.get("/api/settings").json()["ending_type_required"] is False
    res = client.patch("/api/settings", json={"ending_type_required": True})
    assert res.status_code == 200
    assert res.json()["ending_type_required"] is True
    assert client.get("/api/settings").json()["check_choice_targets"] is False


# ── Stories ─────────────────────────────────────────────────


def test_create_list_delete(client):
    res = client.post("/api/stories", json={"title": "My Quest"})
    assert res.status_code == 201
    created = res.json()
    assert created["title"] == "My Quest"
    assert "content" not in created

    listed = client.get("/api/stories").json()
    assert [s["id"] for s in listed] == [created["id"]]

    assert client.delete(f"/api/stories/{created['id']}").json() == {"ok": True}
    assert client.get(f"/api/stories/{created['id']}").status_code == 404
    assert client.delete(f"/api/stories/{created['id']}").status_code == 404


def test_rename_story(client, story_id):
    res = client.patch(f"/api/stories/{story_id}", json={"title": "Renamed"})
    assert res.json()["title"] == "Renamed"
    assert client.patch("/api/stories/abc-1", json={"title": "x"}).status_code == 404


def test_rename_updates_adventure_metadata(client, story_id):
    res = client.patch(f"/api/stories/{story_id}", json={"title": "  The Deep Cave  "})
    assert res.json()["title"] == "The Deep Cave"
    adventure = client.get(f"/api/stories/{story_id}/adventure").json()
    assert adventure["metadata"]["title"] == "The Deep Cave"


@pytest.mark.parametrize("title", ["", "   "])
def test_rename_blank_title_rejected(client, story_id, title):
    res = client.patch(f"/api/stories/{story_id}", json={"title": title})
    assert res.status_code == 422
    assert res.json() == {"errors": {"title_error": "Title must not be blank"}}
    assert client.get(f"/api/stories/{story_id}").json()["title"] == "The Cave"


@pytest.mark.parametrize("title", ["", "   "])
def test_create_blank_title_rejected(client, title):
    res = client.post("/api/stories", json={"title": title})
    assert res.status_code == 422
    assert res.json() == {"errors": {"title_error": "Title must not be blank"}}
    assert client.get("/api/stories").json() == []


def test_created_story_opens(client):
    story = client.post("/api/stories", json={"title": " My Quest "}).json()
    assert story["title"] == "My Quest"
    res = client.get(f"/api/stories/{story['id']}/adventure")
    assert res.status_code == 200
    assert res.json()["metadata"]["title"] == "My Quest"


def test_delete_drops_play_session(client, story_id):
    client.get(f"/api/stories/{story_id}/play/introduction")
    assert story_id in client.app.state.play_sessions
    client.delete(f"/api/stories/{story_id}")
    assert story_id not in client.app.state.play_sessions


def test_get_adventure(client, story_id, sample_document):
    assert client.get(f"/api/stories/{story_id}/adventure").json() == sample_document


def test_adventure_not_found(client):
    res = client.get("/api/stories/abc-1/adventure")
    assert res.status_code == 404
    assert res.json()["detail"] == "Adventure not found."


def test_adventure_load_error(client):
    story_id = client.app.state.storage.create_story("Broken", "[]")
    assert client.get(f"/api/stories/{story_id}/adventure").status_code == 500


# ── Introduction ────────────────────────────────────────────


def test_save_introduction(client, story_id):
    res = client.put(
        f"/api/stories/{story_id}/introduction",
        json={"title": "The Deep Cave", "text": "Dark.\n\nCold."},
    )
    assert res.status_code == 200
    assert res.json()["paragraphs"] == ["Dark.", "Cold."]
    assert client.get(f"/api/stories/{story_id}").json()["title"] == "The Deep Cave"


def test_save_introduction_invalid(client, story_id):
    res = client.put(f"/api/stories/{story_id}/introduction", json={"title": "", "text": "x"})
    assert res.status_code == 422
    assert res.json() == {"errors": {"title_error": "Title must not be blank"}}


# ── Passages ────────────────────────────────────────────────


def test_save_passage(client, story_id):
    body = {
        "text": "First\n\n\n\nSecond\n\n",
        "choices": [{"text": "Go", "goto": 2}],
        "effects": [{"type": "add_item", "item": "lamp"}],
    }
    res = client.put(f"/api/stories/{story_id}/passages/1", json=body)
    assert res.status_code == 200
    assert res.json() == {
        "paragraphs": ["First", "Second"],
        "choices": [{"text": "Go", "goto": 2}],
        "effects": [{"type": "add_item", "item": "lamp"}],
    }
    adventure = client.get(f"/api/stories/{story_id}/adventure").json()
    assert adventure["passages"]["1"]["paragraphs"] == ["First", "Second"]


def test_saved_passage_becomes_editor_baseline(client, story_id, monkeypatch):
    rebased = []
    original_rebase = PassageEditor.rebase

    def spy(editor, passage):
        original_rebase(editor, passage)
        rebased.append((passage, editor.has_changes))

    monkeypatch.setattr(PassageEditor, "rebase", spy)
    body = {"text": "Changed", "choices": [{"text": "Go", "goto": 2}]}
    client.put(f"/api/stories/{story_id}/passages/1", json=body)

    assert len(rebased) == 1
    passage, has_changes = rebased[0]
    assert passage.paragraphs == ["Changed"]
    assert has_changes is False


def test_invalid_passage_is_not_rebased(client, story_id, monkeypatch):
    rebased = []
    monkeypatch.setattr(PassageEditor, "rebase", lambda editor, passage: rebased.append(passage))
    client.put(f"/api/stories/{story_id}/passages/1", json={"text": "A"})
    assert rebased == []


def test_save_passage_without_choices(client, story_id):
    res = client.put(f"/api/stories/{story_id}/passages/1", json={"text": "A"})
    assert res.status_code == 422
    assert res.json()["errors"]["choices_error"] == "Regular passages must have at least one choice"


def test_save_passage_choice_errors_keyed_by_index(client, story_id):
    body = {"text": "A", "choices": [{"text": "Go", "goto": 2}, {"text": "", "goto": None}]}
    res = client.put(f"/api/stories/{story_id}/passages/1", json=body)
    assert res.status_code == 422
    assert set(res.json()["errors"]["choices"]["1"]) == {"text_error", "goto_error"}


def test_save_ending_passage(client, story_id):
    body = {"text": "The end.", "is_ending": True, "ending_type": "defeat"}
    res = client.put(f"/api/stories/{story_id}/passages/1", json=body)
    assert res.json() == {"paragraphs": ["The end."], "ending": True, "type": "defeat"}


def test_ending_type_required_setting(client, story_id):
    client.patch("/api/settings", json={"ending_type_required": True})
    res = client.put(f"/api/stories/{story_id}/passages/4", json={"text": "End", "is_ending": True})
    assert res.status_code == 422
    assert "ending_type_error" in res.json()["errors"]


def test_check_choice_targets_setting(client, story_id):
    body = {"text": "A", "choices": [{"text": "Go", "goto": 42}]}
    assert client.put(f"/api/stories/{story_id}/passages/1", json=body).status_code == 200

    client.patch("/api/settings", json={"check_choice_targets": True})
    res = client.put(f"/api/stories/{story_id}/passages/1", json=body)
    assert res.status_code == 422
    assert res.json()["errors"]["choices"]["0"]["goto_error"] == "Passage #42 does not exist"


@pytest.mark.parametrize("passage_id,status", [("abc", 400), ("99", 404)])
def test_save_passage_bad_id(client, story_id, passage_id, status):
    res = client.put(f"/api/stories/{story_id}/passages/{passage_id}", json={"text": "A"})
    assert res.status_code == status


# ── Play ────────────────────────────────────────────────────


def test_playthrough(client, story_id):
    intro = client.get(f"/api/stories/{story_id}/play/introduction").json()
    assert intro["action"] == "Begin"
    assert intro["inventory"] == []

    res = client.get(f"/api/stories/{story_id}/play/passages/2").json()
    assert res["inventory"] == ["key"]
    assert res["items"] == [{"id": "key", "name": "Key"}]

    res = client.get(f"/api/stories/{story_id}/play/passages/3").json()
    assert res["inventory"] == ["lamp"]

    res = client.get(f"/api/stories/{story_id}/play/passages/0").json()
    assert res["route"] == f"/adventure/{story_id}/test/introduction"
    assert res["inventory"] == []


def test_play_errors(client, story_id):
    assert client.get(f"/api/stories/{story_id}/play/passages/x").status_code == 400
    res = client.get(f"/api/stories/{story_id}/play/passages/99")
    assert res.status_code == 404
    assert res.json()["detail"] == "Passage #99 does not exist in this adventure."


def test_inventory_overrides(client, story_id):
    res = client.post(f"/api/stories/{story_id}/play/inventory/lamp").json()
    assert res["inventory"] == ["lamp"]
    res = client.delete(f"/api/stories/{story_id}/play/inventory/lamp").json()
    assert res["inventory"] == []
