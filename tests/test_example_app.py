import json
from unittest import mock

import pytest
from starlette.testclient import TestClient

from problemdetails.example_app import (
    InternalFailure,
    ResourceNotFound,
    create_app,
    main,
)
from problemdetails.problem import APPLICATION_PROBLEM_JSON


@pytest.fixture
def client():
    with TestClient(create_app()) as test_client:
        yield test_client


def test_ok_returns_200(client):
    response = client.get("/ok")
    assert response.status_code == 200
    assert response.json() == {"message": "Hello, world!"}


def test_not_found_returns_404_problem(client):
    response = client.get("/not-found")
    assert response.status_code == 404
    assert response.headers["content-type"] == APPLICATION_PROBLEM_JSON
    body = response.json()
    assert body["status"] == 404
    assert body["code"] == "RESOURCE_NOT_FOUND"
    assert "User 42" in body["detail"]
    assert body["trace_id"] == "example-trace-id"
    assert body["title"] == "Resource not found"


def test_validate_returns_422_with_errors(client):
    response = client.post(
        "/validate", content="{}", headers={"content-type": "application/json"}
    )
    assert response.status_code == 422
    assert response.headers["content-type"] == APPLICATION_PROBLEM_JSON
    body = response.json()
    assert body["status"] == 422
    assert body["code"] == "VALIDATION_ERROR"
    assert body["type"] == "validation_error"
    errors = body["errors"]
    assert len(errors) == 2
    assert errors[0]["field"] == "email"
    assert errors[1]["field"] == "name"
    assert errors[0]["code"] == "REQUIRED"


def test_validate_treats_empty_strings_as_missing(client):
    response = client.post("/validate", json={"email": "", "name": "Ada"})
    assert response.status_code == 422
    errors = response.json()["errors"]
    assert [error["field"] for error in errors] == ["email"]


def test_validate_accepts_complete_body(client):
    response = client.post("/validate", json={"email": "ada@example.com", "name": "Ada"})
    assert response.status_code == 200
    assert response.json() == {"message": "Created user Ada"}


def test_validate_rejects_missing_content_type(client):
    response = client.post("/validate", content=b"{}")
    assert response.status_code == 415


def test_validate_rejects_malformed_json(client):
    response = client.post(
        "/validate", content="{not json", headers={"content-type": "application/json"}
    )
    assert response.status_code == 400
    assert response.headers["content-type"] == APPLICATION_PROBLEM_JSON


def test_validate_rejects_wrong_field_type(client):
    response = client.post("/validate", json={"email": 5, "name": "Ada"})
    assert response.status_code == 422
    assert "errors" not in response.json()


def test_internal_returns_safe_500_without_leaking(client):
    response = client.get("/internal")
    assert response.status_code == 500
    assert response.headers["content-type"] == APPLICATION_PROBLEM_JSON
    body = response.json()
    assert body["status"] == 500
    text = json.dumps(body)
    for fragment in ("password", "5432", "db.internal", "refused"):
        assert fragment not in text
    assert body["detail"] == "An unexpected error occurred."


def test_resource_not_found_into_problem():
    problem = ResourceNotFound("Order 7").into_problem()
    assert problem.status_code == 404
    assert problem.detail == "Order 7 does not exist"
    assert problem.code == "RESOURCE_NOT_FOUND"


def test_internal_failure_keeps_message_as_cause_only():
    problem = InternalFailure("disk on fire").into_problem()
    assert problem.status_code == 500
    assert str(problem.internal_cause) == "disk on fire"
    assert "disk on fire" not in problem.to_json()


def test_main_serves_on_default_address(capsys):
    with mock.patch("uvicorn.run") as run:
        assert main([]) == 0
    _, kwargs = run.call_args
    assert kwargs == {"host": "127.0.0.1", "port": 3000}
    assert "Listening on 127.0.0.1:3000" in capsys.readouterr().out


def test_main_honours_port_option(capsys):
    with mock.patch("uvicorn.run") as run:
        main(["--port", "8081", "--host", "0.0.0.0"])
    _, kwargs = run.call_args
    assert kwargs["port"] == 8081
    assert kwargs["host"] == "0.0.0.0"
    assert "0.0.0.0:8081" in capsys.readouterr().out