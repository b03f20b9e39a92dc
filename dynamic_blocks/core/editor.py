"""
Descripteur d'éditeur — ce que l'UI doit afficher pour un schéma.

Pour chaque champ connu : une FieldInstance pré-remplie (contrôle UI, onglet,
valeur initiale). Les onglets sont listés dans l'ordre, le premier est actif.
Un champ de type inconnu n'apparaît pas dans l'éditeur.
"""
import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from .field_types import FieldTypeRegistry
from .schemas import BlockSchema, FieldInstance, FieldSchema

log = logging.getLogger(__name__)


class EditorTab(BaseModel):
    name: str
    title: str = ""
    icon: str = ""
    placement: str = "content"


class EditorDescriptor(BaseModel):
    name: str
    title: str
    description: str = ""
    icon: str = "admin-generic"
    category: str = "widgets"
    keywords: List[str] = Field(default_factory=list)
    tabs: List[EditorTab] = Field(default_factory=list)
    active_tab: str = ""
    fields: List[FieldInstance] = Field(default_factory=list)

    def fields_for_tab(self, tab: str) -> List[FieldInstance]:
        return [f for f in self.fields if f.tab == tab]


def _instance(field: FieldSchema, tab: str, field_types: FieldTypeRegistry) -> Optional[FieldInstance]:
    field_type = field_types.resolve(field.type)
    if field_type is None:
        log.debug("Champ %r (type %r) absent de l'éditeur", field.name, field.type)
        return None
    return FieldInstance(
        name=field.name,
        type=field.type,
        label=field.label,
        value=field_type.initial_value(field),
        tab=tab,
        attr_name=field.attr_name or "",
        control=field_type.control,
        options=field.options,
        validation=field.validation,
        repeater_fields=field.repeater_fields,
    )


def build_editor(schema: BlockSchema, field_types: Optional[FieldTypeRegistry] = None) -> EditorDescriptor:
    field_types = field_types or FieldTypeRegistry()
    instances: List[FieldInstance] = []

    for tab in schema.tabs:
        for field in tab.fields:
            instance = _instance(field, tab.name, field_types)
            if instance is not None:
                instances.append(instance)
    for field in schema.fields:
        instance = _instance(field, "", field_types)
        if instance is not None:
            instances.append(instance)

    return EditorDescriptor(
        name=schema.name,
        title=schema.title,
        description=schema.description,
        icon=schema.icon,
        category=schema.category,
        keywords=schema.keywords,
        tabs=[EditorTab(name=t.name, title=t.title, icon=t.icon, placement=t.placement) for t in schema.tabs],
        active_tab=schema.tabs[0].name if schema.tabs else "",
        fields=instances,
    )


def new_repeater_row(field: FieldSchema, field_types: Optional[FieldTypeRegistry] = None) -> dict:
    """Ligne vide d'un row_repeater : {sous-champ: default}, '' pour un type inconnu."""
    field_types = field_types or FieldTypeRegistry()
    row = {}
    for sub in field.repeater_fields:
        sub_type = field_types.resolve(sub.type)
        row[sub.name] = sub_type.get_default(sub) if sub_type else ""
    return row
