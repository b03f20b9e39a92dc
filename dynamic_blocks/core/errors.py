"""
Erreurs du générateur de blocs.

Politique : récupération locale d'abord. Ces exceptions sont levées à
l'intérieur des composants et rattrapées (puis loguées) à la frontière
registry / collector / storage ; l'appelant reçoit False, None ou "".
"""


class BlockConfigError(ValueError):
    """Base de toutes les erreurs de configuration de bloc."""


class MissingRequiredField(BlockConfigError):
    """`name` ou `title` absent — l'enregistrement entier est abandonné."""

    def __init__(self, field: str, block: str = ""):
        self.field = field
        self.block = block
        where = f" (bloc {block!r})" if block else ""
        super().__init__(f"Champ requis manquant : {field!r}{where}")


class InvalidBlockConfig(BlockConfigError):
    """Config structurellement invalide (types incompatibles, JSON illisible…)."""


class UnknownFieldType(BlockConfigError):
    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"Type de champ inconnu : {tag!r}")


class MalformedFieldSerialization(BlockConfigError):
    """Entrée de champ sérialisée (string JSON) impossible à désérialiser."""


class UnknownSchemaName(BlockConfigError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Bloc inconnu : {name!r}")


class UnknownAction(BlockConfigError):
    def __init__(self, action: str, known: list):
        self.action = action
        super().__init__(f"Action inconnue : {action!r}. Actions : {known}")
