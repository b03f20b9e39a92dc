"""
Moteur de template minimal — {{path}}, {{#if path}}…{{/if}}, {{#each path}}…{{/each}}.

Ordre des passes (chacune consomme la sortie de la précédente) :
  1. conditions  : bloc conservé tel quel si la valeur est vraie, supprimé sinon
  2. boucles     : corps rendu récursivement une fois par élément (élément = nouvelle racine)
  3. variables   : remplacées par la valeur résolue, échappée HTML

Les chemins n'acceptent que [A-Za-z0-9_.] : pas d'espaces, pas d'expressions.
Un chemin introuvable donne "" — jamais d'erreur.
"""
import json
import re
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

from ..core.values import get_nested

_PATH = r"[a-zA-Z0-9_.]+"
_IF_RE         = re.compile(r"\{\{#if\s+(" + _PATH + r")\}\}(.*?)\{\{/if\}\}", re.S)
_EACH_TOKEN_RE = re.compile(r"\{\{#each\s+(" + _PATH + r")\}\}|\{\{/each\}\}")
_VAR_RE        = re.compile(r"\{\{(" + _PATH + r")\}\}")

# Emplacement réservé d'une boucle pendant les passes qui ne doivent pas la toucher
_SLOT    = "\x00{}\x00"
_SLOT_RE = re.compile(r"\x00(\d+)\x00")

_AMP_RE = re.compile(r"&(?!#?\w+;)")


# ── Valeurs ──────────────────────────────────────────────────────────────────

def is_truthy(value: Any) -> bool:
    """Véracité à la PHP : '', '0', 0, None, False et conteneurs vides sont faux."""
    if isinstance(value, str):
        return value not in ("", "0")
    return bool(value)


def to_text(value: Any) -> str:
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def escape_html(value: Any) -> str:
    """Échappement HTML sans ré-encoder les entités déjà présentes."""
    text = _AMP_RE.sub("&amp;", to_text(value))
    return (
        text.replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;")
            .replace("'", "&#039;")
    )


# ── Boucles ──────────────────────────────────────────────────────────────────

def _each_blocks(template: str):
    """Blocs {{#each}} de plus haut niveau : (start, end, path, body). Imbrication équilibrée."""
    depth = 0
    start = body_start = 0
    path = ""
    for m in _EACH_TOKEN_RE.finditer(template):
        if m.group(1) is not None:
            if depth == 0:
                start, body_start, path = m.start(), m.end(), m.group(1)
            depth += 1
        elif depth:
            depth -= 1
            if depth == 0:
                yield start, m.end(), path, template[body_start:m.start()]


def _shield(template: str) -> Tuple[str, List[str]]:
    """Remplace chaque boucle de plus haut niveau par un emplacement numéroté."""
    parts: List[str] = []
    slots: List[str] = []
    pos = 0
    for start, end, path, body in _each_blocks(template):
        parts.append(template[pos:start])
        parts.append(_SLOT.format(len(slots)))
        slots.append(template[start:end])
        pos = end
    parts.append(template[pos:])
    return "".join(parts), slots


def _restore(text: str, slots: List[str]) -> str:
    if not slots:
        return text
    return _SLOT_RE.sub(lambda m: slots[int(m.group(1))], text)


def _render_each(path: str, body: str, data: Any) -> str:
    items = get_nested(data, path, [])
    if not isinstance(items, (list, tuple)):
        return ""
    return "".join(render_template(body, item) for item in items)


# ── Point d'entrée public ────────────────────────────────────────────────────

def _substitute(text: str, data: Any) -> str:
    return _VAR_RE.sub(lambda m: escape_html(get_nested(data, m.group(1), "")), text)


def render_template(template: str, data: Any, content: Optional[str] = None) -> str:
    """
    Rend `template` avec `data` (arbre de valeurs).
    `content` (HTML des blocs internes) est exposé sous `{{_content}}`.

    >>> render_template("{{#each items}}{{v}},{{/each}}", {"items": [{"v": 1}, {"v": 2}]})
    '1,2,'
    """
    if not template:
        return ""
    if content is not None and isinstance(data, Mapping):
        data = {**data, "_content": content}
    # NUL réservé aux emplacements de la passe 1
    template = template.replace("\x00", "")

    # 1. Conditions — les corps de boucle sont protégés : leurs {{#if}} visent l'élément courant
    masked, loops = _shield(template)
    masked = _IF_RE.sub(
        lambda m: m.group(2) if is_truthy(get_nested(data, m.group(1))) else "",
        masked,
    )
    template = _restore(masked, loops)

    # 2 + 3. Boucles rendues séparément, variables substituées entre elles seulement
    parts: List[str] = []
    pos = 0
    for start, end, path, body in _each_blocks(template):
        parts.append(_substitute(template[pos:start], data))
        parts.append(_render_each(path, body, data))
        pos = end
    parts.append(_substitute(template[pos:], data))
    return "".join(parts)


def render_template_file(path: str, data: Any, content: Optional[str] = None) -> str:
    """Lit un template sur disque (UTF-8) et le rend."""
    return render_template(Path(path).read_text(encoding="utf-8"), data, content)
