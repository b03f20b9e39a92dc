"""
Tests endpoints /blocks — rendu, validation, catalogue, éditeur
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from dynamic_blocks.registry import BlockRegistry
from dynamic_blocks.router import include_blocks


# ── Fixtures ──────────────────────────────────────────────────────────────

@pytest.fixture
def client():
    registry = BlockRegistry(namespace="dgb")
    registry.register_config({
        "name": "card",
        "title": "Card",
        "category": "design",
        "tabs": [{"name": "content", "title": "Content", "fields": [
            {"type": "title",  "name": "t",    "attr_name": "t", "default": "Hi"},
            {"type": "toggle", "name": "show", "attr_name": "show"},
        ]}],
        "template": "<h1>{{t}}</h1>{{#if show}}<p>shown</p>{{/if}}{{_content}}",
    })
    app = FastAPI()
    include_blocks(app, registry)
    with TestClient(app) as c:
        yield c


# ── POST /blocks/render/{name} ────────────────────────────────────────────

def test_render(client):
    r = client.post("/blocks/render/card", json={"attributes": {"t": "Hello", "show": True}})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert r.text == "<h1>Hello</h1><p>shown</p>"


def test_render_sans_corps(client):
    assert client.post("/blocks/render/card").text == "<h1>Hi</h1>"


def test_render_avec_instances(client):
    r = client.post("/blocks/render/card", json={
        "content": "x",
        "fields": [{"name": "t", "attr_name": "t", "value": "Éditeur"}],
    })
    assert r.text == "<h1>Éditeur</h1>x"


def test_render_inconnu(client):
    r = client.post("/blocks/render/nope", json={})
    assert r.status_code == 200
    assert r.text == ""


# ── POST /blocks/validate ─────────────────────────────────────────────────

def test_validate(client):
    r = client.post("/blocks/validate", json={"name": "ok", "title": "Ok"})
    assert r.json() == {"valid": True, "errors": []}

    r = client.post("/blocks/validate", json={"name": "ok", "title": "Ok",
                                              "fields": [{"type": "select", "name": "s", "attr_name": "s"}]})
    assert r.json() == {"valid": False, "errors": ["Champ select 0 : options manquantes"]}


# ── GET ───────────────────────────────────────────────────────────────────

def test_catalog(client):
    blocks = client.get("/blocks/catalog").json()["blocks"]
    assert blocks == [{
        "name": "card",
        "title": "Card",
        "kind": "block",
        "category": "design",
        "attributes": {
            "t":    {"type": "string",  "default": "Hi"},
            "show": {"type": "boolean", "default": False},
        },
    }]


def test_field_types(client):
    tags = [t["tag"] for t in client.get("/blocks/field-types").json()["field_types"]]
    assert "row_repeater" in tags
    assert len(tags) == 20


def test_editor(client):
    r = client.get("/blocks/card/editor")
    assert r.status_code == 200
    data = r.json()
    assert data["active_tab"] == "content"
    assert [f["name"] for f in data["fields"]] == ["t", "show"]
    assert data["fields"][1]["value"] is False


def test_editor_inconnu(client):
    r = client.get("/blocks/nope/editor")
    assert r.status_code == 404
    assert "error" in r.json()


# ── Noms avec namespace ───────────────────────────────────────────────────

def test_render_nom_avec_namespace(client):
    r = client.post("/blocks/render/dgb/card", json={"attributes": {"t": "NS"}})
    assert r.status_code == 200
    assert r.text == "<h1>NS</h1>"


def test_editor_nom_avec_namespace(client):
    r = client.get("/blocks/dgb/card/editor")
    assert r.status_code == 200
    assert r.json()["name"] == "card"
