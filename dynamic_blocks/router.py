"""
Router FastAPI — hôte de rendu HTTP pour un BlockRegistry.

POST /blocks/render/{name}   → attributs + contenu interne → HTMLResponse ("card" ou "dgb/card")
POST /blocks/validate        → config brute → {"valid": bool, "errors": [...]}
GET  /blocks/catalog         → blocs enregistrés + déclarations d'attributs
GET  /blocks/field-types     → types de champs disponibles
GET  /blocks/{name}/editor   → descripteur d'éditeur du bloc
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, FastAPI
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, Field

from .core.schemas import FieldInstance
from .manifest.utils import validate_config
from .registry import BlockRegistry


class RenderRequest(BaseModel):
    attributes: Dict[str, Any] = Field(default_factory=dict)
    content: str = ""
    fields: List[FieldInstance] = Field(default_factory=list)


def create_router(registry: BlockRegistry, prefix: str = "/blocks") -> APIRouter:
    """Router lié à `registry` (passé explicitement, aucun état global)."""
    router = APIRouter(prefix=prefix, tags=["dynamic_blocks"])

    @router.post("/render/{name:path}", response_class=HTMLResponse, summary="Rend une instance de bloc")
    def render(name: str, payload: Optional[RenderRequest] = None) -> HTMLResponse:
        """HTML du bloc ; corps vide si le bloc est inconnu ou si le rendu échoue."""
        payload = payload or RenderRequest()
        html = registry.render_instance(name, payload.attributes, payload.content, payload.fields)
        return HTMLResponse(content=html)

    @router.post("/validate", summary="Valide une config sans l'enregistrer")
    def validate(config: Dict[str, Any]) -> dict:
        errors = validate_config(config, registry.field_types)
        return {"valid": not errors, "errors": errors}

    @router.get("/catalog", summary="Blocs enregistrés et leurs attributs")
    def catalog() -> JSONResponse:
        blocks = []
        for name, schema in registry.schemas().items():
            blocks.append({
                "name":       name,
                "title":      schema.title,
                "kind":       schema.kind,
                "category":   schema.category,
                "attributes": registry.host_attributes(name),
            })
        return JSONResponse({"blocks": blocks})

    @router.get("/field-types", summary="Types de champs disponibles")
    def field_types() -> JSONResponse:
        return JSONResponse({"field_types": registry.field_types.catalog()})

    @router.get("/{name:path}/editor", summary="Descripteur d'éditeur d'un bloc")
    def editor(name: str) -> JSONResponse:
        descriptor = registry.editor(name)
        if descriptor is None:
            return JSONResponse({"error": f"Bloc '{name}' inconnu"}, status_code=404)
        return JSONResponse(descriptor.model_dump(mode="json"))

    return router


def include_blocks(app: FastAPI, registry: BlockRegistry, prefix: str = "/blocks") -> APIRouter:
    """Monte le router des blocs sur une app FastAPI."""
    router = create_router(registry, prefix)
    app.include_router(router)
    return router
