"""Push a reminder to users who have not logged hours for a while.

Meant to run from cron, e.g. every few minutes.
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(REPO_ROOT / "src"))

from dotenv import load_dotenv

from trackly.config import get_settings_module
from trackly.container import build_container


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        functions_base_url=getattr(settings, "FUNCTIONS_BASE_URL", ""),
        functions_timeout=float(getattr(settings, "FUNCTIONS_TIMEOUT", 30)),
    )
    result = container.notification_service.sweep_inactive()
    print(f"OK: notified={len(result.notified)} failed={len(result.failed)} skipped={result.skipped}")


if __name__ == "__main__":
    main()
