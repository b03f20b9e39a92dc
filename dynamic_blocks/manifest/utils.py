"""
Utilitaires de config de blocs : lecture/validation JSON, scaffold, documentation, export.
"""
import copy
import json
import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from ..core.field_types import FieldTypeRegistry
from ..core.schemas import BlockSchema
from ..renderer.template import escape_html

if TYPE_CHECKING:
    from ..registry import BlockRegistry

log = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^[a-z0-9-]+$")


# ── Lecture / validation ─────────────────────────────────────────────────────

def load_config_file(path: Union[str, Path]) -> Optional[dict]:
    """Charge un fichier JSON de config. None si absent ou JSON invalide."""
    path = Path(path)
    if not path.exists():
        return None
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        log.error("JSON invalide dans %s : %s", path, e)
        return None
    if not isinstance(data, dict):
        log.error("Config inattendue dans %s : objet JSON requis", path)
        return None
    return data


def _validate_field(field: Any, context: str, field_types: FieldTypeRegistry) -> List[str]:
    if not isinstance(field, dict):
        return [f"Champ {context} : objet attendu"]

    errors = []
    field_type = field_types.resolve(field.get("type"))

    if not field.get("type"):
        errors.append(f"Champ {context} : type manquant")
    if not field.get("name"):
        errors.append(f"Champ {context} : name manquant")
    if not field.get("attr_name") and (field_type is None or field_type.persisted):
        errors.append(f"Champ {context} : attr_name manquant")
    if field_type is not None and field_type.has_options and not field.get("options"):
        errors.append(f"Champ {field_type.tag} {context} : options manquantes")
    if field_type is not None and field_type.needs_repeater_fields and not field.get("repeater_fields"):
        errors.append(f"Champ {field_type.tag} {context} : repeater_fields manquants")
    return errors


def validate_config(config: dict, field_types: Optional[FieldTypeRegistry] = None) -> List[str]:
    """
    Valide une config brute. Renvoie la liste des erreurs (vide si valide).

    Vérifie : name/title requis, format du name (a-z, 0-9, tirets), type/name/attr_name
    de chaque champ, options pour les types à options, repeater_fields pour row_repeater,
    name de chaque onglet.
    """
    field_types = field_types or FieldTypeRegistry()
    errors = []

    name = config.get("name")
    if not name:
        errors.append("name du bloc requis")
    elif not _NAME_RE.match(str(name)):
        errors.append("name du bloc : lettres minuscules, chiffres et tirets uniquement")
    if not config.get("title"):
        errors.append("title du bloc requis")

    for index, field in enumerate(config.get("fields") or []):
        errors.extend(_validate_field(field, str(index), field_types))

    for tab_index, tab in enumerate(config.get("tabs") or []):
        if not isinstance(tab, dict):
            errors.append(f"Onglet {tab_index} : objet attendu")
            continue
        tab_name = tab.get("name")
        if not tab_name:
            errors.append(f"Onglet {tab_index} : name manquant")
        for field_index, field in enumerate(tab.get("fields") or []):
            errors.extend(_validate_field(field, f"{tab_name}.{field_index}", field_types))

    return errors


def import_blocks_from_directory(
    directory: Union[str, Path],
    registry: Optional["BlockRegistry"] = None,
) -> Dict[str, list]:
    """
    Valide chaque *.json du dossier ; enregistre les configs valides si un registry est fourni.
    Renvoie {"success": [names], "failed": [fichier | {"file", "errors"}]}.
    """
    results: Dict[str, list] = {"success": [], "failed": []}
    directory = Path(directory)
    if not directory.is_dir():
        return results

    for path in sorted(directory.glob("*.json")):
        config = load_config_file(path)
        if config is None:
            results["failed"].append(path.name)
            continue

        errors = validate_config(config)
        if errors:
            results["failed"].append({"file": path.name, "errors": errors})
            continue

        if registry is not None and not registry.register_config(config):
            results["failed"].append({"file": path.name, "errors": ["enregistrement refusé"]})
            continue
        results["success"].append(config["name"])

    log.info("Import %s : %d ok, %d en échec", directory, len(results["success"]), len(results["failed"]))
    return results


# ── Scaffold ─────────────────────────────────────────────────────────────────

def sanitize_block_name(name: str) -> str:
    """'My Block_v2' → 'my-block-v2'"""
    name = name.lower().replace(" ", "-").replace("_", "-")
    name = re.sub(r"[^a-z0-9-]", "", name)
    name = re.sub(r"-+", "-", name)
    return name.strip("-")


def _simple_template(name: str, with_tabs: bool = False) -> str:
    prefix = "content." if with_tabs else ""
    return (
        f'<div class="{name}">\n'
        f"  <h3>{{{{{prefix}title}}}}</h3>\n"
        f"  <p>{{{{{prefix}description}}}}</p>\n"
        f"  {{{{#if {prefix}image}}}}\n"
        f'    <img src="{{{{{prefix}image.url}}}}" alt="{{{{{prefix}image.alt}}}}" />\n'
        f"  {{{{/if}}}}\n"
        f"</div>"
    )


def generate_template(
    name: str,
    title: str,
    description: str = "",
    icon: str = "admin-generic",
    category: str = "widgets",
    with_tabs: bool = False,
    with_image: bool = False,
    with_repeater: bool = False,
) -> dict:
    """Squelette de config prêt à éditer (titre + description, image/repeater/onglets en option)."""
    prefix = "content." if with_tabs else ""
    fields = [
        {"type": "title",    "name": "block-title", "label": "Title",       "attr_name": f"{prefix}title"},
        {"type": "textarea", "name": "description", "label": "Description", "attr_name": f"{prefix}description"},
    ]
    if with_image:
        fields.append({"type": "image", "name": "featured-image", "label": "Featured Image", "attr_name": f"{prefix}image"})
    if with_repeater:
        fields.append({"type": "attributes-repeater", "name": "attributes", "label": "Attributes", "attr_name": f"{prefix}attributes"})

    config: Dict[str, Any] = {
        "name": name,
        "title": title,
        "description": description,
        "icon": icon,
        "category": category,
        "keywords": [],
    }
    if with_tabs:
        config["tabs"] = [
            {"name": "content", "title": "Content", "icon": "edit", "fields": fields},
            {"name": "settings", "title": "Settings", "icon": "admin-settings", "fields": [{
                "type": "select",
                "name": "layout",
                "label": "Layout",
                "attr_name": "settings.layout",
                "default": "standard",
                "options": [
                    {"label": "Standard", "value": "standard"},
                    {"label": "Card", "value": "card"},
                ],
            }]},
        ]
    else:
        config["fields"] = fields
    config["template"] = _simple_template(name, with_tabs)
    return config


def clone_block(config: dict, new_name: str, new_title: str) -> dict:
    """Copie d'une config sous un nouveau nom ; les classes du template suivent."""
    cloned = copy.deepcopy(config)
    cloned["name"] = new_name
    cloned["title"] = new_title
    if cloned.get("template") and config.get("name"):
        cloned["template"] = cloned["template"].replace(config["name"], new_name)
    return cloned


# ── Export ───────────────────────────────────────────────────────────────────

def export_to_json(config: Union[dict, BlockSchema], output_path: Union[str, Path]) -> bool:
    if isinstance(config, BlockSchema):
        config = config.model_dump(by_alias=True, exclude_none=True)
    try:
        payload = json.dumps(config, indent=4, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        log.error("Export JSON impossible : %s", e)
        return False
    try:
        Path(output_path).write_text(payload, encoding="utf-8")
    except OSError as e:
        log.error("Écriture de %s impossible : %s", output_path, e)
        return False
    return True


def attributes_to_data_string(attributes: Any) -> str:
    """[{"name": "id", "value": 5}] → 'data-id="5"'"""
    if not attributes or not isinstance(attributes, list):
        return ""
    parts = []
    for attr in attributes:
        if not isinstance(attr, dict) or not attr.get("name") or attr.get("value") is None:
            continue
        key = re.sub(r"[^a-z0-9_\-]", "", str(attr["name"]).lower())
        parts.append(f'data-{key}="{escape_html(attr["value"])}"')
    return " ".join(parts)


def generate_documentation(schema: BlockSchema) -> str:
    """Documentation Markdown d'un bloc (infos, champs, template)."""
    lines = [f"# {schema.title}", ""]
    if schema.description:
        lines += [schema.description, ""]

    lines += [
        "## Block Information",
        "",
        f"- **Name**: `{schema.name}`",
        f"- **Category**: {schema.category}",
        f"- **Icon**: {schema.icon}",
        "",
    ]
    if schema.keywords:
        lines += [f"**Keywords**: {', '.join(schema.keywords)}", ""]

    lines += ["## Fields", ""]
    tab_fields = [(tab.title, field) for tab in schema.tabs for field in tab.fields]
    for tab_title, field in [("", f) for f in schema.fields] + tab_fields:
        lines += [f"### {field.label or field.name}", ""]
        if tab_title:
            lines += [f"**Tab**: {tab_title}", ""]
        lines.append(f"- **Type**: `{field.type}`")
        lines.append(f"- **Attribute**: `{field.attr_name or ''}`")
        if field.default is not None:
            default = json.dumps(field.default) if isinstance(field.default, (list, dict)) else field.default
            lines.append(f"- **Default**: `{default}`")
        if field.validation:
            lines.append("- **Validation**:")
            lines += [f"  - {rule}: {value}" for rule, value in field.validation.items()]
        if field.options:
            lines.append("- **Options**:")
            lines += [f"  - {option.label} (`{option.value}`)" for option in field.options]
        lines.append("")

    if schema.template:
        lines += ["## Template", "", "```html", schema.template, "```", ""]

    return "\n".join(lines)
