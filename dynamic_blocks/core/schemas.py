"""
Schémas Pydantic du générateur de blocs.
Structure : BlockSchema → TabSchema → FieldSchema (→ repeater_fields récursifs)

Un BlockSchema est construit une fois depuis une config déclarative (JSON
fichier ou post stocké), defaults fusionnés, puis enregistré dans un
BlockRegistry. Les AttributeDeclaration sont dérivées, jamais lues en config.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class FieldOption(BaseModel):
    label: str = ""
    value: Any = ""


class FieldSchema(BaseModel):
    """Définition d'une valeur éditable (type, label, chemin de stockage)."""
    # Les réglages propres à l'hôte (min, max, placeholder…) sont conservés
    model_config = ConfigDict(extra="allow")

    name: str = ""
    type: str = "text"
    label: str = ""
    attr_name: Optional[str] = Field(default=None, description="Chemin pointé dans le store d'attributs")
    default: Any = None
    options: List[FieldOption] = Field(default_factory=list)
    repeater_fields: List["FieldSchema"] = Field(default_factory=list)
    validation: Dict[str, Any] = Field(default_factory=dict)


class TabSchema(BaseModel):
    name: str = ""
    title: str = ""
    icon: str = ""
    placement: Literal["content", "style"] = "content"
    fields: List[FieldSchema] = Field(default_factory=list)


class AssetSpec(BaseModel):
    """Script ou feuille de style déclaré par un bloc."""
    handle: str = ""
    src: str = ""
    deps: List[str] = Field(default_factory=list)
    version: str = "1.0.0"


class BlockSupports(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    html: bool = False
    align: bool = True
    class_name: bool = Field(default=True, alias="className")


class BlockSchema(BaseModel):
    """
    Schéma normalisé d'un bloc Gutenberg ou d'un widget Elementor.

    Exemple minimal :
    {
      "name": "card",
      "title": "Card",
      "fields": [
        {"type": "title",  "name": "t",    "attr_name": "t", "default": "Hi"},
        {"type": "toggle", "name": "show", "attr_name": "show"}
      ],
      "template": "<h1>{{t}}</h1>{{#if show}}<p>shown</p>{{/if}}"
    }
    """
    model_config = ConfigDict(extra="allow")

    name: str
    title: str
    description: str = ""
    icon: str = "admin-generic"
    category: str = "widgets"
    keywords: List[str] = Field(default_factory=list)
    tabs: List[TabSchema] = Field(default_factory=list)
    fields: List[FieldSchema] = Field(default_factory=list)
    template: str = ""
    template_file: str = ""
    render_service: Optional[str] = None
    controls_service: Optional[str] = None
    supports: BlockSupports = Field(default_factory=BlockSupports)
    enqueue_scripts: List[AssetSpec] = Field(default_factory=list)
    enqueue_styles: List[AssetSpec] = Field(default_factory=list)
    kind: Literal["block", "widget"] = "block"

    def all_fields(self) -> List[FieldSchema]:
        """Champs de premier niveau puis champs de chaque onglet (ordre d'apparition)."""
        fields = list(self.fields)
        for tab in self.tabs:
            fields.extend(tab.fields)
        return fields


class AttributeDeclaration(BaseModel):
    """Déclaration d'attribut persisté : storage type + default."""
    model_config = ConfigDict(frozen=True)

    storage_type: str
    default: Any = None

    def as_host_dict(self) -> dict:
        """Forme attendue par register_block_type : {"type", "default"}."""
        return {"type": self.storage_type, "default": self.default}


class FieldInstance(BaseModel):
    """
    Instance de champ capturée côté éditeur.
    Une instance par champ ; la valeur est réécrite à `attr_name` au rendu.
    """
    name: str = ""
    type: str = "text"
    label: str = ""
    value: Any = ""
    tab: str = ""
    attr_name: str = ""
    control: str = ""
    options: List[FieldOption] = Field(default_factory=list)
    validation: Dict[str, Any] = Field(default_factory=dict)
    repeater_fields: List[FieldSchema] = Field(default_factory=list)
    # HTML rendu des blocs imbriqués dans ce champ (stocké sous <attr_name>_content)
    inner_html: Optional[str] = None
