"""
Registry des blocs / widgets — nom unique → schéma normalisé + déclarations d'attributs.

Instance construite explicitement et passée à qui en a besoin (pas de singleton).
Réenregistrer un nom remplace d'un bloc le schéma ET ses déclarations.

Usage:
    >>> registry = BlockRegistry()
    >>> registry.register_config({
    ...     "name": "card", "title": "Card",
    ...     "fields": [{"type": "title", "name": "t", "attr_name": "t", "default": "Hi"}],
    ...     "template": "<h1>{{t}}</h1>",
    ... })
    True
    >>> registry.render_instance("card", {"t": "Hello"})
    '<h1>Hello</h1>'
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional

from .core.attributes import build_attributes, default_tree
from .core.editor import EditorDescriptor, build_editor
from .core.errors import UnknownSchemaName
from .core.field_types import FieldTypeRegistry
from .core.schemas import AssetSpec, AttributeDeclaration, BlockSchema, FieldInstance
from .core.values import collect_field_values, merge_tree
from .manifest.normalizer import try_normalize
from .renderer.template import render_template, render_template_file
from .services import ServiceRegistry

log = logging.getLogger(__name__)

# Préfixe des noms de blocs côté hôte ("dgb/card")
BLOCK_NAMESPACE = os.getenv("DGB_BLOCK_NAMESPACE", "dgb")


class RegisteredBlock(NamedTuple):
    schema: BlockSchema
    attributes: Dict[str, AttributeDeclaration]


class BlockRegistry:

    def __init__(
        self,
        field_types: Optional[FieldTypeRegistry] = None,
        services: Optional[ServiceRegistry] = None,
        namespace: str = BLOCK_NAMESPACE,
    ):
        self.field_types = field_types or FieldTypeRegistry()
        self.services = services or ServiceRegistry()
        self.namespace = namespace
        self._blocks: Dict[str, RegisteredBlock] = {}

    # ── Enregistrement ───────────────────────────────────────────────────────

    def register(self, schema: BlockSchema) -> bool:
        """Compile les déclarations puis remplace l'entrée du même nom (dernier gagnant)."""
        attributes = build_attributes(schema, self.field_types)
        if schema.name in self._blocks:
            log.info("Bloc %s réenregistré — ancienne définition remplacée", schema.name)
        self._blocks[schema.name] = RegisteredBlock(schema=schema, attributes=attributes)
        log.debug("Bloc %s enregistré (%d attributs)", schema.name, len(attributes))
        return True

    def register_config(self, raw: Mapping) -> bool:
        schema = try_normalize(raw, self.services)
        return self.register(schema) if schema is not None else False

    def register_widget_config(self, raw: Mapping) -> bool:
        schema = try_normalize(raw, self.services, widget=True)
        return self.register(schema) if schema is not None else False

    def unregister(self, name: str) -> bool:
        return self._blocks.pop(self._short_name(name), None) is not None

    # ── Consultation ─────────────────────────────────────────────────────────

    def _short_name(self, name: str) -> str:
        prefix = f"{self.namespace}/"
        return name[len(prefix):] if name.startswith(prefix) else name

    def _entry(self, name: str) -> RegisteredBlock:
        entry = self._blocks.get(self._short_name(name))
        if entry is None:
            raise UnknownSchemaName(name)
        return entry

    def get(self, name: str) -> BlockSchema:
        """Schéma du bloc ; lève UnknownSchemaName s'il est absent."""
        return self._entry(name).schema

    def lookup(self, name: str) -> Optional[BlockSchema]:
        entry = self._blocks.get(self._short_name(name))
        return entry.schema if entry else None

    def attributes(self, name: str) -> Dict[str, AttributeDeclaration]:
        entry = self._blocks.get(self._short_name(name))
        return dict(entry.attributes) if entry else {}

    def host_attributes(self, name: str) -> Dict[str, dict]:
        """Déclarations au format register_block_type : {attr: {"type", "default"}}."""
        return {attr: decl.as_host_dict() for attr, decl in self.attributes(name).items()}

    def names(self) -> List[str]:
        return list(self._blocks)

    def schemas(self) -> Dict[str, BlockSchema]:
        return {name: entry.schema for name, entry in self._blocks.items()}

    def __contains__(self, name: str) -> bool:
        return self._short_name(name) in self._blocks

    def __len__(self) -> int:
        return len(self._blocks)

    def editor(self, name: str) -> Optional[EditorDescriptor]:
        schema = self.lookup(name)
        return build_editor(schema, self.field_types) if schema else None

    def assets(self, name: str) -> Dict[str, List[AssetSpec]]:
        """Scripts / styles déclarés par le bloc (ceux sans handle ou src sont écartés)."""
        schema = self.lookup(name)
        if schema is None:
            return {"scripts": [], "styles": []}
        return {
            "scripts": [a for a in schema.enqueue_scripts if a.handle and a.src],
            "styles":  [a for a in schema.enqueue_styles if a.handle and a.src],
        }

    # ── Rendu ────────────────────────────────────────────────────────────────

    def build_data(
        self,
        name: str,
        attributes: Optional[Mapping[str, Any]] = None,
        field_instances: Optional[Iterable[FieldInstance]] = None,
    ) -> dict:
        """Defaults des déclarations ← attributs reçus ← valeurs des instances de champs."""
        entry = self._entry(name)
        data = default_tree(entry.attributes)
        merge_tree(data, attributes or {})
        if field_instances:
            merge_tree(data, collect_field_values(field_instances))
        return data

    def _dispatch(self, schema: BlockSchema, data: dict, inner_content: str) -> str:
        if schema.template_file and Path(schema.template_file).is_file():
            return render_template_file(schema.template_file, data, inner_content)

        if schema.render_service:
            html = self.services.run(schema.render_service, data)
            if html is None:
                return ""
            # Widgets : la sortie du service est elle-même un template
            if schema.kind == "widget":
                return render_template(str(html), data, inner_content)
            return str(html)

        if schema.template:
            return render_template(schema.template, data, inner_content)

        return inner_content

    def render_instance(
        self,
        name: str,
        attributes: Optional[Mapping[str, Any]] = None,
        inner_content: str = "",
        field_instances: Optional[Iterable[FieldInstance]] = None,
    ) -> str:
        """
        Rend une instance de bloc. Ne lève jamais : "" si le bloc est inconnu
        ou si le rendu échoue.

        Priorité : template_file présent sur disque > render_service > template inline
        > contenu interne brut.
        """
        try:
            schema = self.get(name)
            data = self.build_data(name, attributes, field_instances)
            return self._dispatch(schema, data, inner_content)
        except UnknownSchemaName as e:
            log.warning("Rendu ignoré : %s", e)
            return ""
        except Exception as e:
            log.error("Rendu du bloc %s en échec : %s", name, e)
            return ""
