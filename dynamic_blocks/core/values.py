"""
Store de valeurs imbriquées — get/set par chemin pointé ("content.title").

Sert à reconstruire l'objet d'attributs depuis les instances de champs et à
résoudre les placeholders du template.
"""
import copy
from typing import Any, Iterable, Mapping

from .schemas import FieldInstance


def get_nested(tree: Any, path: str, default: Any = None) -> Any:
    """
    Valeur au chemin `path`, ou `default` au premier segment manquant.
    Ne lève jamais, y compris si un nœud intermédiaire n'est pas un mapping.
    """
    current = tree
    for key in path.split("."):
        if not isinstance(current, Mapping) or key not in current:
            return default
        current = current[key]
    return current


def set_nested(tree: dict, path: str, value: Any) -> None:
    """
    Écrit `value` au chemin `path` en créant les nœuds intermédiaires.
    Un intermédiaire non-mapping est remplacé par un dict vide (la valeur
    scalaire qui s'y trouvait est perdue).
    """
    keys = path.split(".")
    current = tree
    for key in keys[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]
    current[keys[-1]] = value


def expand_dotted(values: Mapping[str, Any]) -> dict:
    """{"settings.layout": "card"} → {"settings": {"layout": "card"}}"""
    tree: dict = {}
    for key, value in values.items():
        set_nested(tree, key, value)
    return tree


def merge_tree(base: dict, overlay: Mapping[str, Any]) -> dict:
    """
    Fusionne `overlay` dans `base` (modifié en place) : les clés pointées sont
    dépliées, les sous-arbres fusionnés, les feuilles remplacées.
    """
    for key, value in expand_dotted(overlay).items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_tree(base[key], value)
        else:
            base[key] = copy.deepcopy(value)
    return base


def collect_field_values(instances: Iterable[FieldInstance]) -> dict:
    """
    Reconstruit l'arbre de valeurs depuis la collection plate d'instances.
    Les instances sans attr_name ou sans valeur sont ignorées ; le HTML
    imbriqué d'un champ est exposé sous `<attr_name>_content`.
    """
    values: dict = {}
    for instance in instances:
        if not instance.attr_name or instance.value is None:
            continue
        set_nested(values, instance.attr_name, instance.value)
        if instance.inner_html is not None:
            set_nested(values, f"{instance.attr_name}_content", instance.inner_html)
    return values
