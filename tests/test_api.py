"""Tests for the FastAPI backend."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from pipeline_backend.main import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def graph_payload(node_ids, pairs) -> dict:
    return {
        "nodes": [
            {"id": nid, "label": nid, "position": {"x": 0, "y": 0}, "selected": False}
            for nid in node_ids
        ],
        "edges": [
            {"id": f"e{i}", "source": src, "target": tgt, "selected": False}
            for i, (src, tgt) in enumerate(pairs)
        ],
    }


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestValidateEndpoint:
    def test_valid(self, client):
        response = client.post("/api/validate", json=graph_payload(["A", "B"], [("A", "B")]))
        assert response.status_code == 200
        assert response.json() == {"isValid": True, "errors": []}

    def test_self_loop(self, client):
        response = client.post("/api/validate", json=graph_payload(["A", "B"], [("A", "A")]))
        assert response.json() == {
            "isValid": False,
            "errors": [
                "1 node(s) are not connected",
                "Pipeline contains cycles (not a valid DAG)",
                "Self-connections are not allowed",
            ],
        }

    def test_malformed_body(self, client):
        response = client.post("/api/validate", json={"nodes": [{"id": "A", "position": "here"}]})
        assert response.status_code == 422


class TestLayoutEndpoint:
    def test_chain(self, client):
        response = client.post(
            "/api/layout",
            json=graph_payload(["A", "B", "C"], [("A", "B"), ("B", "C")]),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [n["position"] for n in body["nodes"]] == [
            {"x": 20.0, "y": 20.0},
            {"x": 20.0, "y": 220.0},
            {"x": 20.0, "y": 420.0},
        ]

    def test_with_config(self, client):
        payload = graph_payload(["A", "B"], [("A", "B")])
        payload["config"] = {"direction": "LR", "margin_x": 0, "margin_y": 0}
        body = client.post("/api/layout", json=payload).json()
        assert [n["position"] for n in body["nodes"]] == [
            {"x": 0.0, "y": 0.0},
            {"x": 280.0, "y": 0.0},
        ]

    def test_empty(self, client):
        body = client.post("/api/layout", json={"nodes": [], "edges": []}).json()
        assert body == {"success": True, "nodes": []}

    def test_invalid_config(self, client):
        payload = graph_payload(["A"], [])
        payload["config"] = {"node_width": -5}
        assert client.post("/api/layout", json=payload).status_code == 422


class TestGeometryEndpoints:
    def test_connection_point(self, client):
        response = client.post(
            "/api/connection-point",
            json={"position": {"x": 10, "y": 20}, "side": "output", "width": 180, "height": 100},
        )
        assert response.json() == {"x": 190.0, "y": 70.0}

    def test_unknown_side(self, client):
        response = client.post(
            "/api/connection-point",
            json={"position": {"x": 0, "y": 0}, "side": "top"},
        )
        assert response.status_code == 400

    def test_edge_path(self, client):
        response = client.post(
            "/api/edge-path",
            json={"source": {"x": 0, "y": 0}, "target": {"x": 100, "y": 50}},
        )
        assert response.json() == {"path": "M 0 0 C 30 0, 70 50, 100 50"}
