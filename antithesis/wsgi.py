"""Gunicorn entry point: ``gunicorn antithesis.wsgi:app``."""

from __future__ import annotations

import os

from whitenoise import WhiteNoise

from antithesis.app_factory import create_app

flask_app = create_app()

# Package assets under /static/, no long-lived caching outside production
app = WhiteNoise(
    flask_app,
    root=os.path.join(os.path.dirname(os.path.abspath(__file__)), "static"),
    prefix="static/",
    max_age=60 if flask_app.config["APP_ENV"] == "production" else 0,
)
