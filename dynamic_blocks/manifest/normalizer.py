"""
Normalizer — config brute (dict JSON / post stocké) → BlockSchema.

1. Déplie l'enveloppe de post stocké {"config": {...}, "render_service", "controls_service"}
2. Appelle le controls_service éventuel → {"sections": [...]} qui remplacent les onglets
3. Exige `name` et `title` (MissingRequiredField sinon)
4. Désérialise les champs (string JSON ou dict) ; une entrée illisible est ignorée
5. Fusionne les defaults (icon, category, tabs, fields, template…) via Pydantic
"""
import json
import logging
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from ..core.errors import BlockConfigError, InvalidBlockConfig, MalformedFieldSerialization, MissingRequiredField
from ..core.schemas import BlockSchema, FieldSchema, TabSchema
from ..services import ServiceRegistry

log = logging.getLogger(__name__)

# Types de contrôles Elementor → tags de champs
_ELEMENTOR_CONTROL_TAGS = {
    "text":      "text",
    "textarea":  "textarea",
    "wysiwyg":   "textarea",
    "code":      "awesome_code",
    "number":    "number",
    "slider":    "small-number",
    "select":    "select",
    "select2":   "select",
    "choose":    "radio",
    "switcher":  "toggle",
    "media":     "image",
    "repeater":  "row_repeater",
    "date_time": "date",
    "url":       "text",
    "color":     "text",
}


# ── Champs ───────────────────────────────────────────────────────────────────

def _widget_field(entry: dict) -> dict:
    """Contrôle Elementor {id, type, label, options{value: label}…} → forme FieldSchema."""
    field = dict(entry)
    field_id = field.pop("id", "") or field.get("name", "")
    field.setdefault("name", field_id)
    field.setdefault("attr_name", field_id or None)

    control = str(field.get("type") or "text").lower()
    field["type"] = _ELEMENTOR_CONTROL_TAGS.get(control, control)

    options = field.get("options")
    if isinstance(options, Mapping):
        field["options"] = [{"label": label, "value": value} for value, label in options.items()]
    if field["type"] == "row_repeater" and isinstance(field.get("fields"), list):
        field["repeater_fields"] = [
            _widget_field(sub) for sub in field.pop("fields") if isinstance(sub, Mapping)
        ]
    return field


def parse_field(entry: Any, widget: bool = False) -> FieldSchema:
    """Entrée de champ (FieldSchema, dict ou string JSON) → FieldSchema."""
    if isinstance(entry, FieldSchema):
        return entry
    if isinstance(entry, str):
        try:
            entry = json.loads(entry)
        except json.JSONDecodeError as e:
            raise MalformedFieldSerialization(f"JSON illisible : {e}") from e
    if not isinstance(entry, Mapping):
        raise MalformedFieldSerialization(f"Entrée inattendue : {type(entry).__name__}")

    data = _widget_field(dict(entry)) if widget else dict(entry)
    try:
        return FieldSchema.model_validate(data)
    except ValidationError as e:
        raise MalformedFieldSerialization(str(e)) from e


def _entries(value: Any, what: str, context: str) -> list:
    """Liste d'entrées ; toute autre forme est ignorée (logué)."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        log.warning("%s — %s ignorés : liste attendue, reçu %s", context, what, type(value).__name__)
        return []
    return list(value)


def _parse_fields(entries: Any, context: str, widget: bool = False) -> List[FieldSchema]:
    fields = []
    for index, entry in enumerate(_entries(entries, "champs", context)):
        try:
            fields.append(parse_field(entry, widget=widget))
        except MalformedFieldSerialization as e:
            log.warning("%s — champ #%d ignoré : %s", context, index, e)
    return fields


def _parse_tab(section: Mapping, context: str, widget: bool = False) -> TabSchema:
    """Onglet Gutenberg {name, title, icon, fields} ou section Elementor {section_id, section_label, section_tab}."""
    name = section.get("name") or section.get("section_id") or ""
    try:
        return TabSchema(
            name=name,
            title=section.get("title") or section.get("section_label") or "",
            icon=section.get("icon") or "",
            placement="style" if section.get("section_tab") == "style" else "content",
            fields=_parse_fields(section.get("fields"), f"{context}.{name}", widget=widget),
        )
    except ValidationError as e:
        raise MalformedFieldSerialization(f"onglet {name!r} invalide : {e}") from e


# ── Sections de contrôles ────────────────────────────────────────────────────

def _load_sections(ref: str, services: Optional[ServiceRegistry]) -> Optional[list]:
    if not isinstance(ref, str):
        log.warning("controls_service ignoré : nom attendu, reçu %s", type(ref).__name__)
        return None
    if services is None:
        log.warning("controls_service %r ignoré : aucun ServiceRegistry fourni", ref)
        return None
    result = services.run(ref)
    sections = result.get("sections") if isinstance(result, Mapping) else None
    if not sections or not isinstance(sections, list):
        log.warning("controls_service %r : aucune section exploitable", ref)
        return None
    return sections


# ── Normalisation ────────────────────────────────────────────────────────────

def _normalize(config: dict, services: Optional[ServiceRegistry], widget: bool) -> BlockSchema:
    if config.get("controls_service"):
        sections = _load_sections(config["controls_service"], services)
        if sections is not None:
            config["tabs"] = sections

    for key in ("name", "title"):
        if not config.get(key):
            raise MissingRequiredField(key, str(config.get("name") or ""))

    name = str(config["name"])
    # Valeurs nulles → defaults du schéma
    config = {k: v for k, v in config.items() if v is not None}
    config["fields"] = _parse_fields(config.get("fields"), name, widget=widget)

    tabs = []
    for index, section in enumerate(_entries(config.get("tabs"), "onglets", name)):
        if not isinstance(section, Mapping):
            log.warning("%s — onglet #%d ignoré : entrée inattendue", name, index)
            continue
        try:
            tabs.append(_parse_tab(section, name, widget=widget))
        except MalformedFieldSerialization as e:
            log.warning("%s — onglet #%d ignoré : %s", name, index, e)
    config["tabs"] = tabs

    try:
        return BlockSchema.model_validate(config)
    except ValidationError as e:
        raise InvalidBlockConfig(f"Bloc {name!r} invalide : {e}") from e


def normalize_config(raw: Mapping, services: Optional[ServiceRegistry] = None) -> BlockSchema:
    """Config de bloc Gutenberg (à plat ou enveloppe de post) → BlockSchema."""
    if not isinstance(raw, Mapping):
        raise InvalidBlockConfig(f"Config attendue sous forme de dict, reçu {type(raw).__name__}")

    config = dict(raw)
    if isinstance(config.get("config"), Mapping):
        envelope = config
        config = dict(envelope["config"])
        for key in ("render_service", "controls_service"):
            if envelope.get(key):
                config[key] = envelope[key]

    return _normalize(config, services, widget=False)


def normalize_widget_config(raw: Mapping, services: Optional[ServiceRegistry] = None) -> BlockSchema:
    """
    Config de widget Elementor → BlockSchema (kind="widget").
    categories[0] → category, controls → tabs, render_html → template.
    """
    if not isinstance(raw, Mapping):
        raise InvalidBlockConfig(f"Config attendue sous forme de dict, reçu {type(raw).__name__}")

    config = dict(raw)
    categories = config.pop("categories", None)
    if isinstance(categories, str):
        categories = [categories]
    if not isinstance(categories, (list, tuple)) or not categories:
        categories = ["basic"]
    config.setdefault("category", categories[0])
    config.setdefault("icon", "eicon-code")
    if "controls" in config:
        config["tabs"] = config.pop("controls")
    if "render_html" in config:
        config["template"] = config.pop("render_html")
    config["kind"] = "widget"

    return _normalize(config, services, widget=True)


def try_normalize(raw: Mapping, services: Optional[ServiceRegistry] = None, widget: bool = False) -> Optional[BlockSchema]:
    """Comme normalize_config / normalize_widget_config, mais None (logué) au lieu de lever."""
    normalize = normalize_widget_config if widget else normalize_config
    try:
        return normalize(raw, services)
    except BlockConfigError as e:
        log.error("Normalisation abandonnée : %s", e)
        return None
