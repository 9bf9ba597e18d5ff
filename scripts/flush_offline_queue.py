"""Replay attendance writes queued while the API was unreachable.

Note: Safe to run repeatedly; each queued bulk-mark overwrites the session records.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.school_admin.school_admin.container import build_container


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    queue_path = getattr(settings, "OFFLINE_QUEUE_PATH", None)
    if not queue_path:
        raise SystemExit("OFFLINE_QUEUE_PATH is not configured")

    container = build_container(api_config=settings.API_CONFIG, offline_queue_path=queue_path)
    try:
        sent = container.offline_queue.flush(container.conn)
        print(f"OK: replayed {sent} write(s), {len(container.offline_queue.pending())} still pending ({queue_path})")
    finally:
        container.shutdown()


if __name__ == "__main__":
    main()
