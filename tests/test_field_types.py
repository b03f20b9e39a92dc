"""
Tests du registry des types de champs
  resolve(tag)              → FieldType | None
  FieldType.get_default(f)  → default déclaré, sinon baseline du storage type
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from dynamic_blocks.core.field_types import DEFAULT_FIELD_TYPES, FieldType, FieldTypeRegistry
from dynamic_blocks.core.schemas import FieldSchema


@pytest.fixture
def types():
    return FieldTypeRegistry()


# ── resolve ───────────────────────────────────────────────────────────────

def test_vingt_types_par_defaut(types):
    assert len(types.tags()) == 20
    assert len({t.tag for t in DEFAULT_FIELD_TYPES}) == 20


@pytest.mark.parametrize("tag,storage", [
    ("text", "string"), ("textarea", "string"), ("date", "string"), ("select", "string"),
    ("radio", "string"), ("service", "string"), ("awesome_code", "string"), ("env_path", "string"),
    ("title", "string"), ("purpose", "string"), ("query", "string"),
    ("number", "number"), ("small-number", "number"),
    ("toggle", "boolean"), ("single-checkbox", "boolean"),
    ("checkbox", "array"), ("attributes-repeater", "array"), ("row_repeater", "array"),
    ("image", "object"),
])
def test_storage_type_par_tag(types, tag, storage):
    assert types.resolve(tag).storage_type == storage


def test_tag_inconnu_ou_vide(types):
    assert types.resolve("hologram") is None
    assert types.resolve("") is None
    assert types.resolve(None) is None
    assert "hologram" not in types
    assert "toggle" in types


def test_register_type_personnalise(types):
    types.register(FieldType(tag="color", label="Color", control="color"))
    assert types.resolve("color").storage_type == "string"
    assert "color" in types.tags()


def test_registry_vide():
    assert FieldTypeRegistry(field_types=[]).tags() == []


def test_catalog_expose_options(types):
    catalog = {t["tag"]: t for t in types.catalog()}
    assert catalog["select"]["has_options"] is True
    assert catalog["text"]["has_options"] is False
    assert set(catalog["toggle"]) == {"tag", "label", "description", "control", "storage_type", "has_options"}


# ── get_default ───────────────────────────────────────────────────────────

class TestGetDefault:
    def test_default_declare_prioritaire(self, types):
        field = FieldSchema(name="t", type="text", default="Hi")
        assert types.resolve("text").get_default(field) == "Hi"

    def test_baselines(self, types):
        assert types.resolve("text").get_default(FieldSchema(type="text")) == ""
        assert types.resolve("number").get_default(FieldSchema(type="number")) == 0
        assert types.resolve("toggle").get_default(FieldSchema(type="toggle")) is False
        assert types.resolve("checkbox").get_default(FieldSchema(type="checkbox")) == []

    def test_image_sans_valeur(self, types):
        """Média non sélectionné → None, pas un objet vide."""
        assert types.resolve("image").get_default(FieldSchema(type="image")) is None

    def test_radio_premiere_option(self, types):
        field = FieldSchema(type="radio", options=[{"label": "A", "value": "a"}, {"label": "B", "value": "b"}])
        assert types.resolve("radio").get_default(field) == "a"

    def test_baseline_non_partagee(self, types):
        """Deux appels → deux listes distinctes."""
        checkbox = types.resolve("checkbox")
        first = checkbox.get_default(FieldSchema(type="checkbox"))
        first.append("x")
        assert checkbox.get_default(FieldSchema(type="checkbox")) == []

    def test_accepte_un_dict(self, types):
        assert types.resolve("text").get_default({"default": "brut"}) == "brut"


# ── initial_value ─────────────────────────────────────────────────────────

class TestInitialValue:
    def test_repeaters_toujours_vides(self, types):
        field = FieldSchema(type="row_repeater", default=[{"label": "x"}])
        assert types.resolve("row_repeater").initial_value(field) == []

    def test_booleen(self, types):
        assert types.resolve("toggle").initial_value(FieldSchema(type="toggle", default=1)) is True
        assert types.resolve("toggle").initial_value(FieldSchema(type="toggle")) is False

    def test_nombre_depuis_string(self, types):
        assert types.resolve("number").initial_value(FieldSchema(type="number", default="12")) == 12
        assert types.resolve("number").initial_value(FieldSchema(type="number", default="1.5")) == 1.5
        assert types.resolve("number").initial_value(FieldSchema(type="number", default="abc")) == 0

    def test_image(self, types):
        assert types.resolve("image").initial_value(FieldSchema(type="image")) is None
