"""
Registry des types de champs.

Chaque tag de type (text, toggle, row_repeater…) est associé à :
  - un contrôle UI (kind consommé par l'éditeur)
  - un storage type (string | number | boolean | array | object)
  - une règle de valeur par défaut

Un tag inconnu n'est jamais une erreur fatale : resolve() renvoie None et
l'appelant ignore le champ.
"""
import copy
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

StorageType = Literal["string", "number", "boolean", "array", "object"]

_STORAGE_BASELINES: Dict[str, Any] = {
    "string":  "",
    "number":  0,
    "boolean": False,
    "array":   [],
    "object":  {},
}


class FieldType(BaseModel):
    """Définition immuable d'un type de champ."""
    model_config = ConfigDict(frozen=True)

    tag: str
    label: str
    description: str = ""
    control: str = "text"
    storage_type: StorageType = "string"
    has_options: bool = False
    needs_repeater_fields: bool = False
    persisted: bool = True
    # Médias : pas de valeur tant que rien n'est sélectionné
    nullable: bool = False

    def _baseline(self) -> Any:
        if self.nullable:
            return None
        return copy.copy(_STORAGE_BASELINES[self.storage_type])

    def get_default(self, field: Any) -> Any:
        """Default déclaré par le champ, sinon baseline du type."""
        default = _field_attr(field, "default")
        if default is not None:
            return default
        if self.tag == "radio":
            options = _field_attr(field, "options") or []
            if options:
                return _option_value(options[0])
        return self._baseline()

    def initial_value(self, field: Any) -> Any:
        """Valeur injectée dans une nouvelle instance de champ côté éditeur."""
        default = _field_attr(field, "default")
        if self.tag in ("attributes-repeater", "row_repeater"):
            return []
        if self.storage_type == "boolean":
            return bool(default)
        if self.storage_type == "number":
            return _to_number(default) if default is not None else 0
        if self.tag == "image":
            return None
        return self.get_default(field)


def _field_attr(field: Any, key: str) -> Any:
    if isinstance(field, dict):
        return field.get(key)
    return getattr(field, key, None)


def _option_value(option: Any) -> Any:
    return option.get("value") if isinstance(option, dict) else getattr(option, "value", None)


def _to_number(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    return int(number) if number.is_integer() else number


# ── Types par défaut ─────────────────────────────────────────────────────────

DEFAULT_FIELD_TYPES: List[FieldType] = [
    FieldType(tag="text",                label="Text",                description="Single line text input"),
    FieldType(tag="textarea",            label="Textarea",            description="Multi-line text input", control="textarea"),
    FieldType(tag="number",              label="Number",              description="Numeric input", control="number", storage_type="number"),
    FieldType(tag="small-number",        label="Small Number",        description="Compact numeric input with min/max", control="number", storage_type="number"),
    FieldType(tag="select",              label="Select",              description="Dropdown selection", control="select", has_options=True),
    FieldType(tag="radio",               label="Radio Buttons",       description="Single selection from multiple options", control="radio", has_options=True),
    FieldType(tag="checkbox",            label="Checkboxes",          description="Multiple selection from options", control="checkbox", storage_type="array", has_options=True),
    FieldType(tag="single-checkbox",     label="Single Checkbox",     description="Single on/off checkbox", control="checkbox", storage_type="boolean"),
    FieldType(tag="toggle",              label="Toggle",              description="Boolean on/off switch", control="toggle", storage_type="boolean"),
    FieldType(tag="image",               label="Image",               description="Media library image picker", control="media", storage_type="object", nullable=True),
    FieldType(tag="date",                label="Date",                description="Date picker", control="date"),
    FieldType(tag="title",               label="Title",               description="Pre-configured title field"),
    FieldType(tag="purpose",             label="Purpose",             description="Pre-configured purpose/description", control="textarea"),
    FieldType(tag="query",               label="Query",               description="SQL query textarea", control="textarea"),
    FieldType(tag="service",             label="Service",             description="Service name input"),
    FieldType(tag="awesome_code",        label="Code",                description="Code editor textarea", control="code"),
    FieldType(tag="env_path",            label="Environment Path",    description="Environment path input"),
    FieldType(tag="attributes-repeater", label="Attributes Repeater", description="Dynamic key-value pairs", control="attributes_repeater", storage_type="array"),
    FieldType(tag="row_repeater",        label="Row Repeater",        description="Custom repeatable rows", control="row_repeater", storage_type="array", needs_repeater_fields=True),
    FieldType(tag="innerblocks",         label="Inner Blocks",        description="Nested Gutenberg blocks", control="inner_blocks", persisted=False),
]


class FieldTypeRegistry:
    """
    Table tag → FieldType.

    Usage:
        >>> types = FieldTypeRegistry()
        >>> types.resolve("toggle").storage_type
        'boolean'
        >>> types.resolve("inexistant") is None
        True
    """

    def __init__(self, field_types: Optional[List[FieldType]] = None):
        self._types: Dict[str, FieldType] = {}
        for field_type in (DEFAULT_FIELD_TYPES if field_types is None else field_types):
            self.register(field_type)

    def register(self, field_type: FieldType) -> None:
        self._types[field_type.tag] = field_type

    def resolve(self, tag: Optional[str]) -> Optional[FieldType]:
        if not tag:
            return None
        return self._types.get(tag)

    def __contains__(self, tag: str) -> bool:
        return tag in self._types

    def tags(self) -> List[str]:
        return list(self._types)

    def catalog(self) -> List[dict]:
        """Liste publique des types (label, description, has_options…)."""
        return [
            t.model_dump(include={"tag", "label", "description", "control", "storage_type", "has_options"})
            for t in self._types.values()
        ]
