"""Core — types de champs, schémas, store de valeurs, attributs, éditeur."""
from .errors import (
    BlockConfigError,
    MissingRequiredField,
    InvalidBlockConfig,
    UnknownFieldType,
    MalformedFieldSerialization,
    UnknownSchemaName,
    UnknownAction,
)
from .field_types import FieldType, FieldTypeRegistry, DEFAULT_FIELD_TYPES
from .schemas import (
    FieldOption,
    FieldSchema,
    TabSchema,
    AssetSpec,
    BlockSupports,
    BlockSchema,
    AttributeDeclaration,
    FieldInstance,
)
from .values import get_nested, set_nested, expand_dotted, merge_tree, collect_field_values
from .attributes import build_attributes, default_tree, storage_default
from .editor import EditorDescriptor, EditorTab, build_editor, new_repeater_row

__all__ = [
    "BlockConfigError", "MissingRequiredField", "InvalidBlockConfig", "UnknownFieldType",
    "MalformedFieldSerialization", "UnknownSchemaName", "UnknownAction",
    "FieldType", "FieldTypeRegistry", "DEFAULT_FIELD_TYPES",
    "FieldOption", "FieldSchema", "TabSchema", "AssetSpec", "BlockSupports",
    "BlockSchema", "AttributeDeclaration", "FieldInstance",
    "get_nested", "set_nested", "expand_dotted", "merge_tree", "collect_field_values",
    "build_attributes", "default_tree", "storage_default",
    "EditorDescriptor", "EditorTab", "build_editor", "new_repeater_row",
]
