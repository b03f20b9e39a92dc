"""SQLite — engine + session + accès aux posts de configuration"""
import json, logging, os
from pathlib import Path
from typing import Dict, List, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ..registry import BlockRegistry
from .models import Base, BlockPostDB, PostStatus, PostType

log = logging.getLogger(__name__)

DATA_DIR = Path(os.getenv("DGB_DATA_DIR", "data"))
DB_PATH  = os.getenv("DGB_DB_PATH", str(DATA_DIR / "dynamic_blocks.db"))


def make_engine(db_path: Optional[str] = None) -> Engine:
    path = Path(db_path or DB_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(f"sqlite:///{path}", connect_args={"check_same_thread": False})


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)


def get_db(factory: sessionmaker):
    db = factory()
    try:
        yield db
    finally:
        db.close()


# ── JSON helpers ──
def _load_config(post: BlockPostDB) -> Optional[dict]:
    try:
        data = json.loads(post.config or "{}")
    except json.JSONDecodeError as e:
        log.warning("Post %s (%s) : config JSON invalide, ignoré — %s", post.module, post.post_type, e)
        return None
    if not isinstance(data, dict):
        log.warning("Post %s (%s) : config non-objet, ignoré", post.module, post.post_type)
        return None
    return data


def jd(o) -> str:
    return json.dumps(o, ensure_ascii=False)


# ── Posts ──
def save_block_post(
    db: Session,
    module: str,
    config: dict,
    post_type: PostType = PostType.BLOCK,
    title: Optional[str] = None,
    controls_service: Optional[str] = None,
    render_service: Optional[str] = None,
    status: PostStatus = PostStatus.PUBLISH,
) -> BlockPostDB:
    """Crée ou met à jour le post (post_type, module)."""
    post_type = PostType(post_type)
    post = db.scalar(
        select(BlockPostDB).where(BlockPostDB.post_type == post_type.value, BlockPostDB.module == module)
    )
    if post is None:
        post = BlockPostDB(post_type=post_type.value, module=module)
        db.add(post)
    post.title = title or config.get("title", "")
    post.config = jd(config)
    post.controls_service = controls_service
    post.render_service = render_service
    post.status = PostStatus(status).value
    db.commit(); db.refresh(post)
    return post


def get_collection(db: Session, post_type: PostType = PostType.BLOCK) -> List[dict]:
    """
    Posts publiés → records prêts pour le registry.
    Bloc   : {"module", "config": {...}, "render_service", "controls_service"}
    Widget : config à plat + module / services
    """
    post_type = PostType(post_type)
    posts = db.scalars(
        select(BlockPostDB)
        .where(BlockPostDB.post_type == post_type.value, BlockPostDB.status == PostStatus.PUBLISH.value)
        .order_by(BlockPostDB.created_at)
    ).all()

    records = []
    for post in posts:
        config = _load_config(post)
        if config is None:
            continue
        services = {k: v for k, v in (("controls_service", post.controls_service), ("render_service", post.render_service)) if v}
        if post_type is PostType.BLOCK:
            records.append({"module": post.module, "config": config, **services})
        else:
            records.append({**config, "module": post.module, **services})
    return records


def load_registry(db: Session, registry: BlockRegistry) -> Dict[str, List[str]]:
    """Enregistre tous les blocs puis tous les widgets publiés. Renvoie {"success", "failed"} (modules)."""
    results: Dict[str, List[str]] = {"success": [], "failed": []}
    for post_type, register in (
        (PostType.BLOCK,  registry.register_config),
        (PostType.WIDGET, registry.register_widget_config),
    ):
        for record in get_collection(db, post_type):
            ok = register(record)
            results["success" if ok else "failed"].append(record["module"])
    log.info("Registry chargé : %d ok, %d en échec", len(results["success"]), len(results["failed"]))
    return results
