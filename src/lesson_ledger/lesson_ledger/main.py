from __future__ import annotations

import importlib
import logging
from pathlib import Path
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .ledger.controller import register as register_ledger

logger = logging.getLogger(__name__)


def _load_settings() -> ModuleType:
    from config import get_settings_module

    return importlib.import_module(get_settings_module())


def create_app(*, settings: Optional[ModuleType] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    settings = settings or _load_settings()

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.debug(
            "settings=%s db=%s@%s:%s/%s",
            settings.__name__,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            unmark_policy=getattr(settings, "UNMARK_POLICY", "exact"),
            low_pack_threshold=int(getattr(settings, "LOW_PACK_THRESHOLD", 3)),
            persist_workers=int(getattr(settings, "PERSIST_WORKERS", 4)),
        )
        container.ledger_service.load()

    register_ledger(app, container)
    app.extensions["lesson_ledger"] = container
    return app
