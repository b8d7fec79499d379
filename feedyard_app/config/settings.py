"""
Basic settings and logging configuration for the feedyard app.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

ACCOUNT_ENV_VAR = "FEEDYARD_ACCOUNT_ID"


@dataclass(slots=True)
class Settings:
    """Application-level settings."""

    project_root: Path
    data_dir: Path
    db_path: Path
    account_id: str = ""

    @classmethod
    def default(cls) -> "Settings":
        """Create default settings based on the current file location."""
        project_root = Path(__file__).resolve().parents[2]
        data_dir = project_root / "feedyard_app_data"
        data_dir.mkdir(exist_ok=True)
        db_path = data_dir / "feedyard.db"
        account_id = os.environ.get(ACCOUNT_ENV_VAR, "local").strip()
        return cls(
            project_root=project_root,
            data_dir=data_dir,
            db_path=db_path,
            account_id=account_id,
        )


def init_logging(settings: Settings) -> None:
    """Configure basic logging to console and a file in the data dir."""
    log_file = settings.data_dir / "feedyard.log"

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )

    logging.getLogger(__name__).info(
        "Logging initialized. DB at %s (account %s)", settings.db_path, settings.account_id
    )
