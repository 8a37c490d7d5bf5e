from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.digitization_portal.digitization_portal.database.bootstrap import apply_schema, list_tables

logger = logging.getLogger("init_db")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create the catalog database and apply schema.sql")
    parser.add_argument(
        "--schema",
        default=str(REPO_ROOT / "database" / "schema.sql"),
        help="path to the schema file",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=args.schema)
    tables = list_tables(db_config)
    logger.info(
        "Applied %s -> %s@%s:%s/%s (tables: %s)",
        Path(args.schema).name,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        ", ".join(tables),
    )


if __name__ == "__main__":
    main()
