"""Development runner.
Usage: python run.py  (reads .env if present)
Set DEV_CREATE_ALL=1 to auto-create tables (development only).
"""

from __future__ import annotations

import os
import signal

from dotenv import load_dotenv

from antithesis import create_app
from antithesis.db import create_all
from antithesis.http import HTTPServer

load_dotenv()

app = create_app()

if __name__ == "__main__":  # pragma: no cover
    if os.getenv("DEV_CREATE_ALL", "0").lower() in ("1", "true", "yes"):
        create_all()
    server = HTTPServer(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "3000")))

    def _shutdown(signum, _frame):
        server.stop()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)
    server.start()
    server.wait()
