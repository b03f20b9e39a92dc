"""
Collecteur de configs — reçoit les déclarations "gt_blocks.register" /
"element_widgets.register" (attributs + contenu JSON) et les accumule dans
une liste possédée, puis les enregistre explicitement dans un BlockRegistry.

Les actions forment un ensemble fermé (Action) ; chaque action a son handler
dans une table vérifiée à l'import. Un tag inconnu est rejeté avant tout appel.
"""
import json
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from .core.errors import BlockConfigError, UnknownAction
from .registry import BlockRegistry

log = logging.getLogger(__name__)


class Action(str, Enum):
    REGISTER = "register"


class ConfigKind(str, Enum):
    BLOCK  = "gt_blocks"
    WIDGET = "element_widgets"


def parse_args(content: Optional[str], atts: Optional[Mapping[str, Any]] = None) -> Optional[dict]:
    """Contenu JSON (vide → {}) + attributs qui le surchargent. None si le JSON est invalide."""
    content = (content or "").strip()
    args: dict = {}
    if content:
        try:
            args = json.loads(content)
        except json.JSONDecodeError as e:
            log.error("JSON invalide : %s — %.80s", e, content)
            return None
        if not isinstance(args, dict):
            log.error("JSON invalide : objet attendu, reçu %s", type(args).__name__)
            return None
    args.update(atts or {})
    return args


def _register(collector: "ConfigCollector", atts: Mapping[str, Any], content: Optional[str]) -> bool:
    record = parse_args(content, atts)
    if record is None:
        return False
    collector.records.append(record)
    return True


_HANDLERS: Dict[Action, Callable[["ConfigCollector", Mapping[str, Any], Optional[str]], bool]] = {
    Action.REGISTER: _register,
}

if set(_HANDLERS) != set(Action):
    raise RuntimeError(f"Actions sans handler : {sorted(set(Action) - set(_HANDLERS))}")


def _record_name(record: Mapping) -> str:
    config = record.get("config")
    if isinstance(config, Mapping) and config.get("name"):
        return str(config["name"])
    return str(record.get("name") or record.get("module") or "?")


class ConfigCollector:
    """
    Usage:
        >>> collector = ConfigCollector(ConfigKind.BLOCK)
        >>> collector.run("gt_blocks.register", {}, '{"name": "card", "title": "Card"}')
        True
        >>> collector.register_all(BlockRegistry())
        {'success': ['card'], 'failed': []}
    """

    def __init__(self, kind: ConfigKind = ConfigKind.BLOCK):
        self.kind = ConfigKind(kind)
        self.records: List[dict] = []

    def parse_action(self, tag: str) -> Action:
        pieces = tag.split(".")
        if len(pieces) != 2:
            raise BlockConfigError(f"Tag {tag!r} : exactement deux parties attendues")
        if pieces[0] != self.kind.value:
            raise BlockConfigError(f"Tag {tag!r} : préfixe {self.kind.value!r} attendu")
        try:
            return Action(pieces[1])
        except ValueError:
            raise UnknownAction(pieces[1], [a.value for a in Action]) from None

    def run(self, tag: str, atts: Optional[Mapping[str, Any]] = None, content: Optional[str] = None) -> bool:
        try:
            action = self.parse_action(tag)
        except BlockConfigError as e:
            log.error("Déclaration ignorée : %s", e)
            return False
        return _HANDLERS[action](self, atts or {}, content)

    def register_all(self, registry: BlockRegistry) -> Dict[str, List[str]]:
        register = (
            registry.register_widget_config if self.kind is ConfigKind.WIDGET
            else registry.register_config
        )
        results: Dict[str, List[str]] = {"success": [], "failed": []}
        for record in self.records:
            ok = register(record)
            results["success" if ok else "failed"].append(_record_name(record))
        return results
