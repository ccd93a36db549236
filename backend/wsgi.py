"""WSGI entrypoint: ``gunicorn -c gunicorn.conf.py wsgi:app``."""

from __future__ import annotations

from shopauth import create_app

app = create_app()

if __name__ == "__main__":  # pragma: no cover - manual dev server
    app.run(host="0.0.0.0", port=app.config["PORT"])
