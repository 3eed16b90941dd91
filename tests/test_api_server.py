from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

from conftest import make_builder
from quizcode.constants.network_constants import CLIENT_TOKEN_COOKIE, IDENTITY_COOKIE
from quizcode.server.api_server import create_api_app


@pytest.fixture
def published(manager):
    builder = make_builder()
    builder.update_question(0, text="What is **2 + 2**?")
    return manager.save_quiz(builder, "host", publish=True)


@pytest.fixture
def client(manager):
    return TestClient(create_api_app(manager))


def _sign_in(client: TestClient, name: str = "Ann") -> None:
    response = client.post("/identity", json={"display_name": name})
    assert response.status_code == 200


def test_participant_page_is_served(client):
    for path in ("/", "/join/ABC234"):
        response = client.get(path)
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]


def test_identity_round_trip(client):
    assert client.get("/identity").json() == {"display_name": None}
    response = client.post("/identity", json={"display_name": "  Ann  "})
    assert response.json() == {"display_name": "Ann"}
    assert IDENTITY_COOKIE in response.cookies
    token = response.cookies[CLIENT_TOKEN_COOKIE]
    assert token
    assert client.get("/identity").json() == {"display_name": "Ann"}

    renamed = client.post("/identity", json={"display_name": "Annie"})
    assert CLIENT_TOKEN_COOKIE not in renamed.cookies
    assert client.cookies[CLIENT_TOKEN_COOKIE] == token


@pytest.mark.parametrize("name", ["   ", "x" * 21])
def test_identity_rejects_blank_and_long_names(client, name):
    assert client.post("/identity", json={"display_name": name}).status_code == 422


def test_quiz_summary_by_code(client, published):
    response = client.get(f"/quizzes/{published.share_code.lower()}")
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Capitals"
    assert body["question_count"] == 2
    assert client.get("/quizzes/ZZZZZ1").status_code == 404


def test_join_requires_identity(client, published):
    assert client.post(f"/quizzes/{published.share_code}/session").status_code == 401


def test_session_before_join_is_not_found(client, published):
    _sign_in(client)
    assert client.get(f"/quizzes/{published.share_code}/session").status_code == 404


def test_full_flow_with_reveal(client, published, clock):
    code = published.share_code
    _sign_in(client)

    joined = client.post(f"/quizzes/{code}/session")
    assert joined.status_code == 201
    assert joined.json()["status"] == "waiting"

    started = client.post(f"/quizzes/{code}/session/start").json()
    assert started["status"] == "active"
    assert started["question"]["text_html"] == "<p>What is <strong>2 + 2</strong>?</p>\n"
    assert started["correct_option_ids"] is None

    clock.advance(4)
    option_ids = [option["id"] for option in started["question"]["options"]]
    answered = client.post(f"/quizzes/{code}/session/answer", json={"option_id": option_ids[1]})
    assert answered.status_code == 201
    body = answered.json()
    assert body["revealing"] is True
    assert body["selected_option_id"] == option_ids[1]
    assert body["correct_option_ids"] == [option_ids[1]]

    again = client.post(f"/quizzes/{code}/session/answer", json={"option_id": option_ids[0]})
    assert again.status_code == 409

    clock.advance(3)
    next_question = client.get(f"/quizzes/{code}/session").json()
    assert next_question["question_index"] == 1
    assert next_question["time_remaining"] == 30


def test_unknown_option_is_unprocessable(client, published):
    code = published.share_code
    _sign_in(client)
    client.post(f"/quizzes/{code}/session")
    client.post(f"/quizzes/{code}/session/start")
    response = client.post(f"/quizzes/{code}/session/answer", json={"option_id": "nope"})
    assert response.status_code == 422


def test_starting_twice_conflicts(client, published):
    code = published.share_code
    _sign_in(client)
    client.post(f"/quizzes/{code}/session")
    assert client.post(f"/quizzes/{code}/session/start").status_code == 200
    assert client.post(f"/quizzes/{code}/session/start").status_code == 409


def test_answers_reach_the_results(client, manager, published):
    code = published.share_code
    _sign_in(client)
    client.post(f"/quizzes/{code}/session")
    started = client.post(f"/quizzes/{code}/session/start").json()
    correct_id = started["question"]["options"][1]["id"]
    client.post(f"/quizzes/{code}/session/answer", json={"option_id": correct_id})

    report = manager.get_results(published.id)
    (result,) = report.participants
    assert result.participant_name == "Ann"
    assert result.score == 50.0


def test_join_after_start_conflicts(client, manager, published):
    code = published.share_code
    _sign_in(client)
    assert client.post(f"/quizzes/{code}/session").status_code == 201
    assert client.post(f"/quizzes/{code}/session").status_code == 201
    client.post(f"/quizzes/{code}/session/start")

    again = client.post(f"/quizzes/{code}/session")

    assert again.status_code == 409
    assert len(manager.get_results(published.id).participants) == 1
    assert client.get(f"/quizzes/{code}/session").json()["status"] == "active"


def test_same_name_in_another_browser_cannot_take_over(manager, published):
    app = create_api_app(manager)
    owner = TestClient(app)
    other = TestClient(app)
    code = published.share_code
    _sign_in(owner, "Ada")
    _sign_in(other, "Ada")
    owner.post(f"/quizzes/{code}/session")
    started = owner.post(f"/quizzes/{code}/session/start").json()
    option_id = started["question"]["options"][1]["id"]

    assert other.post(f"/quizzes/{code}/session").status_code == 409
    assert other.get(f"/quizzes/{code}/session").status_code == 404
    assert other.post(f"/quizzes/{code}/session/answer", json={"option_id": option_id}).status_code == 409

    session = owner.get(f"/quizzes/{code}/session").json()
    assert session["selected_option_id"] is None
    assert session["accepts_input"] is True
