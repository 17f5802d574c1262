# tests/test_web.py
import pytest
from fastapi.testclient import TestClient

from captionline.web import create_app

SRT_INPUT = (
    "1\n00:00:00,000 --> 00:00:02,000\nHello cat\n\n"
    "2\n00:00:03,000 --> 00:00:04,000\ncat and cat\n"
)


@pytest.fixture
def client():
    return TestClient(create_app())


def _upload(name="talk.srt", content=SRT_INPUT):
    return {"file": (name, content.encode("utf-8"), "application/octet-stream")}


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_formats(client):
    formats = {f["name"]: f for f in client.get("/api/formats").json()["formats"]}
    assert set(formats) == {"srt", "vtt", "ass", "json"}
    assert formats["ass"]["can_import"] is False
    assert formats["vtt"]["mime_type"] == "text/vtt"


def test_convert_to_vtt(client):
    resp = client.post("/api/convert", files=_upload(), data={"target": "vtt"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/vtt")
    assert 'filename="talk.vtt"' in resp.headers["content-disposition"]
    assert resp.text.startswith("WEBVTT\n\n1\n00:00:00.000 --> 00:00:02.000\nHello cat")


def test_convert_with_replace_and_style(client):
    resp = client.post(
        "/api/convert",
        files=_upload(),
        data={
            "target": "vtt",
            "styled": "true",
            "position": "top",
            "replace_search": "cat",
            "replace_with": "dog",
            "replace_all": "true",
        },
    )
    assert resp.status_code == 200
    assert "line:10%" in resp.text
    assert "<c.styled>dog and dog</c>" in resp.text


def test_convert_to_ass_uses_style(client):
    resp = client.post("/api/convert", files=_upload(), data={"target": "ass", "opacity": "0"})
    assert resp.status_code == 200
    assert ",&HFF000000," in resp.text


def test_convert_unknown_target(client):
    resp = client.post("/api/convert", files=_upload(), data={"target": "sbv"})
    assert resp.status_code == 400


def test_convert_rejects_ass_upload(client):
    resp = client.post("/api/convert", files=_upload(name="in.ass", content="[Script Info]"))
    assert resp.status_code == 400


def test_inspect(client):
    resp = client.post("/api/inspect", files=_upload())
    assert resp.status_code == 200
    body = resp.json()
    assert body["input_name"] == "talk.srt"
    assert body["total_count"] == 2
    assert [c["text"] for c in body["captions"]] == ["Hello cat", "cat and cat"]
    assert body["stats"]["total_words"] == 5
    assert body["validation"]["valid"] is True


def test_inspect_with_explicit_format(client):
    content = '{"captions": [{"text": "a", "start": 0, "end": 1}]}'
    resp = client.post(
        "/api/inspect",
        files=_upload(name="upload.txt", content=content),
        data={"source_format": "json"},
    )
    assert resp.status_code == 200
    assert resp.json()["total_count"] == 1


def test_inspect_invalid_json(client):
    resp = client.post("/api/inspect", files=_upload(name="bad.json", content="{"))
    assert resp.status_code == 400


def test_upload_size_limit(client, monkeypatch):
    monkeypatch.setenv("CAPTIONLINE_WEB_MAX_UPLOAD_MB", "0")
    resp = client.post("/api/inspect", files=_upload())
    assert resp.status_code == 413
