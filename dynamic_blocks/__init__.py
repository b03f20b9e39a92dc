"""
Dynamic Blocks v1.0 — blocs Gutenberg et widgets Elementor déclarés en JSON.

Usage :
    >>> from dynamic_blocks import BlockRegistry
    >>> registry = BlockRegistry()
    >>> registry.register_config({
    ...     "name": "card",
    ...     "title": "Card",
    ...     "fields": [
    ...         {"type": "title",  "name": "t",    "attr_name": "t", "default": "Hi"},
    ...         {"type": "toggle", "name": "show", "attr_name": "show"},
    ...     ],
    ...     "template": "<h1>{{t}}</h1>{{#if show}}<p>shown</p>{{/if}}",
    ... })
    True
    >>> registry.render_instance("card", {"t": "Hello", "show": True})
    '<h1>Hello</h1><p>shown</p>'
"""

# ── Core ─────────────────────────────────────────────────────────────────────
from .core import (
    BlockConfigError, MissingRequiredField, InvalidBlockConfig, UnknownFieldType,
    MalformedFieldSerialization, UnknownSchemaName, UnknownAction,
    FieldType, FieldTypeRegistry,
    FieldOption, FieldSchema, TabSchema, AssetSpec, BlockSupports,
    BlockSchema, AttributeDeclaration, FieldInstance,
    get_nested, set_nested, collect_field_values,
    build_attributes,
    EditorDescriptor, build_editor,
)

# ── Manifest / rendu ─────────────────────────────────────────────────────────
from .manifest import normalize_config, normalize_widget_config, validate_config
from .renderer import render_template

# ── Registry / services / collecteur ─────────────────────────────────────────
from .services import ServiceRegistry
from .registry import BlockRegistry
from .collector import Action, ConfigCollector, ConfigKind

__version__ = "1.0.0"

__all__ = [
    # erreurs
    "BlockConfigError", "MissingRequiredField", "InvalidBlockConfig", "UnknownFieldType",
    "MalformedFieldSerialization", "UnknownSchemaName", "UnknownAction",
    # core
    "FieldType", "FieldTypeRegistry",
    "FieldOption", "FieldSchema", "TabSchema", "AssetSpec", "BlockSupports",
    "BlockSchema", "AttributeDeclaration", "FieldInstance",
    "get_nested", "set_nested", "collect_field_values",
    "build_attributes", "EditorDescriptor", "build_editor",
    # manifest / rendu
    "normalize_config", "normalize_widget_config", "validate_config", "render_template",
    # registry
    "ServiceRegistry", "BlockRegistry",
    "Action", "ConfigCollector", "ConfigKind",
]
