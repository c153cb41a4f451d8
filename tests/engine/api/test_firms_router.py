"""Unit tests for the FIRMS router — parsing, layers, live fetch.

Endpoints are exercised through TestClient; the FIRMS fetch is mocked
(no external API calls).
"""
from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import app.routers.firms as firms_router
from app.config import settings
from engine.firms.client import FirmsResponseError
from engine.layers import LayerManager


CSV_TEXT = (
    "latitude,longitude,confidence\n"
    "34.05,-118.25,high\n"
    "bad,-118.30,low\n"
    "34.10,-118.40,nominal\n"
)


def _make_app():
    app = FastAPI()
    app.include_router(firms_router.router)
    return app


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(firms_router, "layer_manager", LayerManager())
    return TestClient(_make_app())


def _post_csv(client, path, text, **params):
    return client.post(
        path, content=text.encode("utf-8"),
        headers={"Content-Type": "text/csv"}, params=params,
    )


# ---------------------------------------------------------------------------
# Parse
# ---------------------------------------------------------------------------

@pytest.mark.unit
class TestParseEndpoint:

    def test_parse(self, client):
        resp = _post_csv(client, "/api/firms/parse", CSV_TEXT)
        assert resp.status_code == 200
        data = resp.json()
        assert data["count"] == 2
        first = data["records"][0]
        assert first["latitude"] == pytest.approx(34.05)
        assert first["confidence"] == "high"
        assert first["frp"] is None

    def test_parse_empty_body(self, client):
        resp = _post_csv(client, "/api/firms/parse", "")
        assert resp.status_code == 200
        assert resp.json() == {"count": 0, "records": []}

    def test_parse_bom(self, client):
        resp = _post_csv(client, "/api/firms/parse", "\ufefflatitude,longitude\n1,2\n")
        assert resp.json()["count"] == 1

    def test_parse_not_utf8(self, client):
        resp = client.post("/api/firms/parse", content=b"latitude,longitude\n\xff\xfe,1\n")
        assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------

@pytest.mark.unit
class TestLayerEndpoints:

    def test_import_and_list(self, client):
        resp = _post_csv(client, "/api/firms/layers", CSV_TEXT, name="LA", source="VIIRS_SNPP_NRT")
        assert resp.status_code == 201
        summary = resp.json()
        assert summary["name"] == "LA"
        assert summary["source"] == "VIIRS_SNPP_NRT"
        assert summary["feature_count"] == 2
        assert summary["visible"] is True

        listing = client.get("/api/firms/layers").json()
        assert [l["layer_id"] for l in listing] == [summary["layer_id"]]

    def test_geojson(self, client):
        lid = _post_csv(client, "/api/firms/layers", CSV_TEXT).json()["layer_id"]
        gj = client.get(f"/api/firms/layers/{lid}/geojson").json()
        assert gj["type"] == "FeatureCollection"
        assert gj["features"][0]["geometry"]["coordinates"] == [-118.25, 34.05]

    def test_geojson_unknown(self, client):
        assert client.get("/api/firms/layers/nope/geojson").status_code == 404

    def test_visibility(self, client):
        lid = _post_csv(client, "/api/firms/layers", CSV_TEXT).json()["layer_id"]
        resp = client.put(f"/api/firms/layers/{lid}/visibility", json={"visible": False})
        assert resp.status_code == 200
        assert resp.json()["visible"] is False

    def test_visibility_unknown(self, client):
        resp = client.put("/api/firms/layers/nope/visibility", json={"visible": False})
        assert resp.status_code == 404

    def test_delete(self, client):
        lid = _post_csv(client, "/api/firms/layers", CSV_TEXT).json()["layer_id"]
        assert client.delete(f"/api/firms/layers/{lid}").status_code == 200
        assert client.delete(f"/api/firms/layers/{lid}").status_code == 404
        assert client.get("/api/firms/layers").json() == []


# ---------------------------------------------------------------------------
# Live fetch
# ---------------------------------------------------------------------------

@pytest.mark.unit
class TestFetchEndpoint:

    def test_fetch(self, client, monkeypatch):
        monkeypatch.setattr(settings, "firms_map_key", "abc123")
        with patch(
            "app.routers.firms.FirmsClient.fetch_csv",
            new=AsyncMock(return_value=CSV_TEXT),
        ) as fetch:
            resp = client.get("/api/firms/fetch", params={"bbox": "-125,30,-110,40", "days": 2})
        assert resp.status_code == 200
        gj = resp.json()
        assert len(gj["features"]) == 2
        assert gj["layer"]["source"] == settings.firms_source
        assert fetch.await_args.kwargs["days"] == 2
        assert len(client.get("/api/firms/layers").json()) == 1

    def test_fetch_bad_bbox(self, client):
        resp = client.get("/api/firms/fetch", params={"bbox": "1,2,3"})
        assert resp.status_code == 400

    def test_fetch_no_key(self, client, monkeypatch):
        monkeypatch.setattr(settings, "firms_map_key", "")
        resp = client.get("/api/firms/fetch", params={"bbox": "-125,30,-110,40"})
        assert resp.status_code == 503

    def test_fetch_upstream_error(self, client, monkeypatch):
        monkeypatch.setattr(settings, "firms_map_key", "abc123")
        with patch(
            "app.routers.firms.FirmsClient.fetch_csv",
            new=AsyncMock(side_effect=httpx.ConnectError("down")),
        ):
            resp = client.get("/api/firms/fetch", params={"bbox": "-125,30,-110,40"})
        assert resp.status_code == 502

    def test_fetch_firms_message(self, client, monkeypatch):
        monkeypatch.setattr(settings, "firms_map_key", "abc123")
        with patch(
            "app.routers.firms.FirmsClient.fetch_csv",
            new=AsyncMock(side_effect=FirmsResponseError("Invalid MAP_KEY.")),
        ):
            resp = client.get("/api/firms/fetch", params={"bbox": "-125,30,-110,40"})
        assert resp.status_code == 502
        assert "Invalid MAP_KEY" in resp.json()["detail"]

    def test_days_out_of_range(self, client):
        resp = client.get("/api/firms/fetch", params={"bbox": "-125,30,-110,40", "days": 30})
        assert resp.status_code == 422


@pytest.mark.unit
class TestConfigEndpoint:

    def test_config(self, client, monkeypatch):
        monkeypatch.setattr(settings, "firms_map_key", "")
        data = client.get("/api/firms/config").json()
        assert data["center_lat"] == settings.map_center_lat
        assert data["source"] == settings.firms_source
        assert data["live_fetch"] is False
