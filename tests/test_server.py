import time

import pytest
from fastapi.testclient import TestClient

from marvin.brain import narrator
from marvin.server.main import create_app


@pytest.fixture
def client(make_assistant):
    assistant = make_assistant()
    with TestClient(create_app(assistant)) as c:
        yield c


def poll(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_welcome_on_startup(client):
    messages = client.get("/conversation").json()
    assert messages[0] == {"sender": "Marvin", "text": narrator.WELCOME}


def test_command(client):
    r = client.post("/command", json={"text": "hello"})
    assert r.status_code == 200
    assert r.json() == {"say": narrator.GREETING, "responses": [narrator.GREETING]}


def test_command_with_several_lines(client):
    r = client.post("/command", json={"text": "search for cats"})
    assert r.json()["responses"] == ['Searching Google for "cats".', narrator.SEARCH_DONE]


def test_empty_command(client):
    assert client.post("/command", json={"text": "   "}).status_code == 422


def test_pro_mode_and_ask(client):
    assert client.post("/ask", json={"message": "hi"}).json()["say"] == narrator.PRO_MODE_REQUIRED
    assert client.post("/pro-mode", json={"enabled": True}).json()["say"] == narrator.PRO_MODE_ON
    assert client.post("/ask", json={"message": "hi"}).json()["say"] == "LLM says hi"


def test_perception_snapshot_when_idle(client):
    snap = client.get("/perception").json()
    assert snap["webcam_active"] is False
    assert snap["emotion_active"] is False
    assert snap["detections"] == []
    assert snap["detection_text"] == "No objects detected"
    assert snap["emotion"]["face_detected"] is False


def test_frame_needs_vision(client):
    assert client.get("/vision/frame.jpg").status_code == 404


def test_vision_frame(client):
    assert client.post("/command", json={"text": "turn on vision"}).json()["say"] == narrator.CAMERA_ON
    assert poll(lambda: client.get("/perception").json()["detections"])
    r = client.get("/vision/frame.jpg")
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/jpeg"
    assert client.get("/perception").json()["detection_text"] == "person (90%), cup (55%)"


def test_shutdown_rejects_further_commands(client):
    assert client.post("/command", json={"text": "goodbye"}).json()["say"] == narrator.GOODBYE
    assert poll(lambda: client.post("/command", json={"text": "hello"}).status_code == 409)
    assert client.post("/ask", json={"message": "hi"}).status_code == 409
    assert client.post("/pro-mode", json={"enabled": True}).status_code == 409
