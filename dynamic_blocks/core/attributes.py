"""
Attribute Builder — schéma normalisé → déclarations d'attributs persistés.
"""
import copy
import logging
from typing import Dict, Optional

from .errors import UnknownFieldType
from .field_types import FieldTypeRegistry
from .schemas import AttributeDeclaration, BlockSchema
from .values import set_nested

log = logging.getLogger(__name__)

_STORAGE_DEFAULTS = {"array": [], "boolean": False, "number": 0}


def storage_default(storage_type: str):
    """Baseline d'un storage type : array → [], boolean → False, number → 0, sinon ''."""
    return copy.copy(_STORAGE_DEFAULTS.get(storage_type, ""))


def build_attributes(
    schema: BlockSchema,
    field_types: Optional[FieldTypeRegistry] = None,
) -> Dict[str, AttributeDeclaration]:
    """
    Déclarations {attr_name: AttributeDeclaration} pour tous les champs du schéma
    (champs de premier niveau + champs des onglets).

    - champ sans attr_name → ignoré (champ de présentation, ex. innerblocks)
    - type inconnu → ignoré et logué, les champs voisins sont conservés
    - default : field.default s'il est non nul, sinon baseline du storage type
    - attr_name en double → le dernier champ l'emporte
    """
    field_types = field_types or FieldTypeRegistry()
    attributes: Dict[str, AttributeDeclaration] = {}

    for field in schema.all_fields():
        if not field.attr_name:
            continue
        field_type = field_types.resolve(field.type)
        if field_type is None:
            log.warning("Bloc %s — champ %r ignoré : %s", schema.name, field.name, UnknownFieldType(field.type))
            continue

        if field.default is not None:
            default = field.default
        else:
            default = storage_default(field_type.storage_type)
        attributes[field.attr_name] = AttributeDeclaration(
            storage_type=field_type.storage_type,
            default=default,
        )

    return attributes


def default_tree(attributes: Dict[str, AttributeDeclaration]) -> dict:
    """Defaults des déclarations dépliés en arbre de valeurs (copies profondes)."""
    tree: dict = {}
    for attr_name, declaration in attributes.items():
        set_nested(tree, attr_name, copy.deepcopy(declaration.default))
    return tree
