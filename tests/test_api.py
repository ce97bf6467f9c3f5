from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from config import Settings


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(Settings(strict_arity=True)))


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_evaluate_returns_value(client):
    response = client.post("/evaluate", json={"text": "1 * 2 + 3"})

    assert response.status_code == 200
    body = response.json()
    assert body["value"] == 5.0
    assert body["steps"] == []


def test_evaluate_with_trace(client):
    response = client.post("/evaluate", json={"text": "2 * 3 + 1", "trace": True})

    assert response.json()["steps"] == ["2 * 3 = 6", "6 + 1 = 7"]


def test_evaluate_non_finite_values_as_strings(client):
    assert client.post("/evaluate", json={"text": "1 / 0"}).json()["value"] == "inf"
    assert client.post("/evaluate", json={"text": "0 / 0"}).json()["value"] == "NaN"


def test_evaluate_syntax_error_is_400(client):
    response = client.post("/evaluate", json={"text": "1 +"})

    assert response.status_code == 400
    body = response.json()
    assert body["position"] == 3
    assert body["expected"] == "expression"
    assert body["found"] == "end of input"


def test_evaluate_unknown_function_is_422(client):
    response = client.post("/evaluate", json={"text": "abc(1, 2)"})

    assert response.status_code == 422
    assert response.json()["function"] == "abc"


def test_evaluate_arity_depends_on_settings(client):
    assert client.post("/evaluate", json={"text": "abs(-1, 2)"}).status_code == 422

    lenient = TestClient(create_app(Settings(strict_arity=False)))
    response = lenient.post("/evaluate", json={"text": "abs(-1, 2)"})
    assert response.status_code == 200
    assert response.json()["value"] == 1.0


def test_evaluate_rejects_empty_text(client):
    assert client.post("/evaluate", json={"text": ""}).status_code == 422


def test_parse_returns_ast_and_source(client):
    response = client.post("/parse", json={"text": "1 + x"})

    assert response.status_code == 200
    body = response.json()
    assert body["ast"]["node_type"] == "binary"
    assert body["ast"]["op"] == "+"
    assert body["source"] == "(1.0 + x)"


def test_parse_simplify(client):
    response = client.post("/parse", json={"text": "1 + 2 * 3", "simplify": True})

    assert response.json()["ast"] == {"node_type": "number", "value": 7.0}


def test_functions_lists_table(client):
    functions = client.get("/functions").json()["functions"]

    assert len(functions) == 35
    assert {"name": "mul_add", "arity": 3} in functions
