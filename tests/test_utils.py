"""
Tests des utilitaires : validation, import de dossier, scaffold, export, documentation
"""
import sys, os, json
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pathlib import Path

import pytest

from dynamic_blocks.manifest.normalizer import normalize_config
from dynamic_blocks.manifest.utils import (
    attributes_to_data_string, clone_block, export_to_json, generate_documentation,
    generate_template, import_blocks_from_directory, load_config_file,
    sanitize_block_name, validate_config,
)
from dynamic_blocks.registry import BlockRegistry

SEEDS = Path(__file__).parent.parent / "seeds"


# ── validate_config ───────────────────────────────────────────────────────

@pytest.mark.parametrize("tag", ["select", "radio", "checkbox"])
def test_options_manquantes(tag):
    errors = validate_config({
        "name": "x", "title": "X",
        "fields": [{"type": tag, "name": "f", "attr_name": "f"}],
    })
    assert errors == [f"Champ {tag} 0 : options manquantes"]


def test_config_valide():
    assert validate_config(generate_template("demo", "Demo", with_tabs=True, with_image=True)) == []


def test_name_et_title():
    assert validate_config({}) == ["name du bloc requis", "title du bloc requis"]
    assert validate_config({"name": "My Block", "title": "x"}) == [
        "name du bloc : lettres minuscules, chiffres et tirets uniquement",
    ]


def test_champ_incomplet():
    errors = validate_config({"name": "x", "title": "X", "fields": [{"label": "?"}]})
    assert errors == ["Champ 0 : type manquant", "Champ 0 : name manquant", "Champ 0 : attr_name manquant"]


def test_innerblocks_sans_attr_name():
    assert validate_config({"name": "x", "title": "X", "fields": [{"type": "innerblocks", "name": "inner"}]}) == []


def test_row_repeater_sans_sous_champs():
    errors = validate_config({"name": "x", "title": "X", "fields": [{"type": "row_repeater", "name": "r", "attr_name": "r"}]})
    assert errors == ["Champ row_repeater 0 : repeater_fields manquants"]


def test_onglets():
    errors = validate_config({
        "name": "x", "title": "X",
        "tabs": [{"title": "Sans nom"}, "pas un objet", {"name": "s", "fields": [{"type": "text", "name": "f"}]}],
    })
    assert errors == ["Onglet 0 : name manquant", "Onglet 1 : objet attendu", "Champ s.0 : attr_name manquant"]


# ── Fichiers ──────────────────────────────────────────────────────────────

def test_load_config_file(tmp_path):
    assert load_config_file(tmp_path / "absent.json") is None
    (tmp_path / "bad.json").write_text("{pas du json", encoding="utf-8")
    assert load_config_file(tmp_path / "bad.json") is None
    (tmp_path / "list.json").write_text("[1, 2]", encoding="utf-8")
    assert load_config_file(tmp_path / "list.json") is None
    assert load_config_file(SEEDS / "card.json")["name"] == "card"


def test_import_seeds():
    registry = BlockRegistry()
    results = import_blocks_from_directory(SEEDS, registry)
    assert results["success"] == ["card", "feature-list"]
    assert len(results["failed"]) == 1
    assert results["failed"][0]["file"] == "broken.json"
    assert sorted(registry.names()) == ["card", "feature-list"]


def test_import_seed_rendu():
    registry = BlockRegistry()
    import_blocks_from_directory(SEEDS, registry)
    html = registry.render_instance("feature-list", {
        "content.items": [{"label": "Rapide", "highlight": True}, {"label": "Simple"}],
    })
    assert html == (
        '<section class="features features--standard"><h2>Features</h2>'
        '<ul><li class="hl">Rapide</li><li>Simple</li></ul></section>'
    )


def test_import_dossier_absent(tmp_path):
    assert import_blocks_from_directory(tmp_path / "absent") == {"success": [], "failed": []}


def test_import_sans_registry(tmp_path):
    (tmp_path / "a.json").write_text(json.dumps(generate_template("a", "A")), encoding="utf-8")
    (tmp_path / "z.json").write_text("oops", encoding="utf-8")
    assert import_blocks_from_directory(tmp_path) == {"success": ["a"], "failed": ["z.json"]}


def test_export_to_json(tmp_path):
    schema = normalize_config(generate_template("demo", "Demo"))
    path = tmp_path / "demo.json"
    assert export_to_json(schema, path) is True
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["name"] == "demo"
    assert data["supports"]["className"] is True
    assert "render_service" not in data


def test_export_dossier_absent(tmp_path):
    assert export_to_json({"name": "x"}, tmp_path / "absent" / "x.json") is False


# ── Scaffold ──────────────────────────────────────────────────────────────

def test_sanitize_block_name():
    assert sanitize_block_name("My Block_v2") == "my-block-v2"
    assert sanitize_block_name("  Hé!! -- x ") == "h-x"


def test_generate_template_rendu():
    registry = BlockRegistry()
    assert registry.register_config(generate_template("demo", "Demo", with_image=True)) is True
    html = registry.render_instance("demo", {"title": "T", "description": "D"})
    assert "<h3>T</h3>" in html
    assert "<p>D</p>" in html
    assert "<img" not in html


def test_generate_template_onglets():
    config = generate_template("demo", "Demo", with_tabs=True, with_repeater=True)
    assert [t["name"] for t in config["tabs"]] == ["content", "settings"]
    assert "{{content.title}}" in config["template"]
    assert config["tabs"][0]["fields"][-1]["type"] == "attributes-repeater"


def test_clone_block():
    config = generate_template("demo", "Demo")
    cloned = clone_block(config, "demo-copy", "Demo Copy")
    assert cloned["name"] == "demo-copy"
    assert 'class="demo-copy"' in cloned["template"]
    assert config["name"] == "demo"
    cloned["fields"].append({})
    assert len(config["fields"]) == 2


def test_attributes_to_data_string():
    attrs = [{"name": "ID", "value": 5}, {"name": "title", "value": '"x"'}, {"name": "", "value": 1}, {"name": "n"}]
    assert attributes_to_data_string(attrs) == 'data-id="5" data-title="&quot;x&quot;"'
    assert attributes_to_data_string("pas une liste") == ""


def test_generate_documentation():
    schema = normalize_config(json.loads((SEEDS / "feature-list.json").read_text(encoding="utf-8")))
    doc = generate_documentation(schema)
    assert doc.startswith("# Feature List")
    assert "## Block Information" in doc
    assert "- **Name**: `feature-list`" in doc
    assert "**Tab**: Settings" in doc
    assert "  - Card (`card`)" in doc
    assert "```html" in doc
