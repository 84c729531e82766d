#!/usr/bin/env python3
"""Entry point to run the tracker API."""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobtracker.config import load_settings
from jobtracker.log import get_logger

log = get_logger(__name__)


if __name__ == "__main__":
    from jobtracker.server import create_app

    settings = load_settings()
    app = create_app(settings)
    log.info("Serving tracker API on http://%s:%d", settings.host, settings.port)
    log.info("  Jobs file: %s", settings.jobs_file)
    app.run(host=settings.host, port=settings.port)
