"""
Services externes — fournisseurs de sections de contrôles et de rendu.

Un bloc peut référencer un `controls_service` (→ {"sections": [...]}) et un
`render_service` (données → HTML) par leur nom. Un service absent ou en échec
donne None : l'erreur est loguée, jamais propagée au registry.
"""
import logging
from typing import Any, Callable, Dict, Optional

log = logging.getLogger(__name__)

Service = Callable[..., Any]


class ServiceRegistry:
    """
    Usage:
        >>> services = ServiceRegistry()
        >>> services.add("card.render", lambda data: f"<h1>{data['t']}</h1>")
        >>> services.run("card.render", {"t": "Hi"})
        '<h1>Hi</h1>'
    """

    def __init__(self):
        self._services: Dict[str, Service] = {}
        self._descriptions: Dict[str, str] = {}

    def add(self, name: str, fn: Service, description: str = "") -> None:
        self._services[name] = fn
        self._descriptions[name] = description

    def __contains__(self, name: str) -> bool:
        return name in self._services

    def describe(self) -> Dict[str, str]:
        return dict(self._descriptions)

    def run(self, name: str, data: Optional[dict] = None) -> Any:
        fn = self._services.get(name)
        if fn is None:
            log.warning("Service introuvable : %s", name)
            return None
        try:
            return fn() if data is None else fn(data)
        except Exception as e:
            log.error("Service %s en échec : %s", name, e)
            return None
