import pytest
from fastapi.testclient import TestClient

from backend.app import storage
from backend.app.main import create_app
from solver import graph


@pytest.fixture
def store():
    return storage.MemoryStore()


@pytest.fixture
def client(store):
    return TestClient(create_app(store))


_EXAMPLE = {"matrix": [["2+1i", "-1"], ["-1", "2"]], "vector": ["1", "1i"]}


def test_parse_endpoint(client) -> None:
    resp = client.post("/api/parse", json={"text": "3+4j"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["re"] == 3.0
    assert body["im"] == 4.0
    assert body["rect"] == "3.000 +4.000j"
    assert body["polar"] == "5.000 ∠ 53.13°"


def test_parse_endpoint_rejects_bad_text(client) -> None:
    resp = client.post("/api/parse", json={"text": "3+4"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == {
        "code": "PARSE_ERROR",
        "message": "invalid complex value: 3+4",
    }


def test_solve_records_history_and_saved_systems(client, store) -> None:
    resp = client.post("/api/solve", json=_EXAMPLE)
    assert resp.status_code == 200
    body = resp.json()
    assert body["summary"]["validation_status"] == "pass"
    assert len(body["solution"]["polar"]) == 2

    history = client.get("/api/history").json()
    assert len(history) == 1
    assert history[0]["x_polar"] == body["solution"]["polar"]

    assert len(storage.load_saved_systems(store)) == 1
    assert len(client.get("/api/saved").json()) == 1


def test_solve_errors_map_to_400(client) -> None:
    resp = client.post("/api/solve", json={"matrix": [["1", "1"], ["1", "1"]], "vector": ["1", "2"]})
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "SINGULAR_MATRIX"

    resp = client.post("/api/solve", json={"matrix": [["1", "x"], ["0", "1"]], "vector": ["1", "2"]})
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "PARSE_ERROR"
    assert resp.json()["detail"]["message"].startswith("A[1][2]")

    resp = client.post("/api/solve", json={"matrix": [["1", "2"], ["3"]], "vector": ["1", "2"]})
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "INVALID_SHAPE"

    assert client.get("/api/history").json() == []


def test_overflowing_solve_is_rejected_and_not_saved(client, store) -> None:
    resp = client.post("/api/solve", json={"matrix": [["1e200"]], "vector": ["1e200"]})
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "NUMERIC_OVERFLOW"

    assert client.get("/api/history").status_code == 200
    assert client.get("/api/history").json() == []
    assert client.get("/api/saved").json() == []
    assert storage.load_saved_systems(store) == []


def test_solve_diagram_returns_png_in_stored_theme(client, store) -> None:
    storage.set_theme(store, "pink")
    try:
        resp = client.post("/api/solve/diagram", json=_EXAMPLE)
        assert graph.C_BG == graph._PINK_GRAPH["C_BG"]
    finally:
        graph.set_theme("dark")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert resp.content.startswith(b"\x89PNG")
    assert client.get("/api/history").json() == []

    resp = client.post("/api/solve/diagram", json={"matrix": [["0"]], "vector": ["1"]})
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "SINGULAR_MATRIX"


def test_clear_history_keeps_saved_systems(client) -> None:
    client.post("/api/solve", json=_EXAMPLE)
    assert client.delete("/api/history").json() == {"cleared": True}
    assert client.get("/api/history").json() == []
    assert len(client.get("/api/saved").json()) == 1

    client.delete("/api/saved")
    assert client.get("/api/saved").json() == []


def test_saved_grid_endpoint(client) -> None:
    client.post("/api/solve", json=_EXAMPLE)
    resp = client.get("/api/saved/0")
    assert resp.status_code == 200
    body = resp.json()
    assert body["size"] == 2
    assert body["vector"] == ["1.000 ∠ 0.000°", "1.000 ∠ 90.00°"]

    assert client.get("/api/saved/5").status_code == 404


def test_examples_endpoint(client) -> None:
    body = client.get("/api/examples/3").json()
    assert body["size"] == 3
    assert body["vector"] == ["1", "0", "1i"]

    blank = client.get("/api/examples/7").json()
    assert blank["size"] == 7
    assert blank["matrix"][0][0] == "1∠0"

    assert client.get("/api/examples/0").json()["size"] == 1
    assert client.get("/api/examples/99").json()["size"] == 10


def test_theme_endpoints(client, store) -> None:
    assert client.get("/api/settings/theme").json() == {"theme": "dark"}
    assert client.post("/api/settings/theme/cycle").json() == {"theme": "light"}

    resp = client.put("/api/settings/theme", json={"theme": "pink"})
    assert resp.json() == {"theme": "pink"}
    assert storage.get_theme(store) == "pink"

    assert client.put("/api/settings/theme", json={"theme": "neon"}).status_code == 400
