import json

import pytest
from fastapi.testclient import TestClient

from mock_catalog.daemon import create_app


@pytest.fixture
def client(models_dir):
    return TestClient(create_app(models_dir))


def test_status(client):
    r = client.get("/status")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert r.json()["documents"] == 4


def test_listing_has_files_and_directories(client):
    r = client.get("/repos/sunspec/models/contents/json", params={"ref": "master"})
    assert r.status_code == 200
    entries = {e["name"]: e for e in r.json()}
    assert set(entries) == {"README.md", "model_1.json", "model_103.json", "model_201.json", "model_802.json", "schema"}
    assert entries["schema"]["type"] == "dir"
    assert entries["schema"]["download_url"] is None
    assert entries["model_1.json"]["path"] == "json/model_1.json"
    assert entries["model_1.json"]["download_url"] == "http://testserver/raw/sunspec/models/master/json/model_1.json"


def test_listing_uses_requested_ref(client):
    r = client.get("/repos/sunspec/models/contents/json", params={"ref": "dev"})
    entry = next(e for e in r.json() if e["name"] == "model_1.json")
    assert "/dev/" in entry["download_url"]


def test_raw_document(client, catalog_documents):
    r = client.get("/raw/sunspec/models/master/json/model_201.json")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/json")
    assert json.loads(r.content) == catalog_documents["model_201.json"]


def test_raw_document_not_found(client):
    assert client.get("/raw/sunspec/models/master/json/model_5.json").status_code == 404


def test_listing_of_missing_directory(tmp_path):
    client = TestClient(create_app(tmp_path / "nowhere"))
    assert client.get("/repos/sunspec/models/contents/json").status_code == 404
    assert client.get("/status").json()["documents"] == 0


def test_shutdown_without_server(client):
    r = client.post("/shutdown")
    assert r.status_code == 200
    assert r.json() == {"message": "Server shutting down"}
