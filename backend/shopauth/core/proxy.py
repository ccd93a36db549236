"""Reverse-proxy awareness for deployments behind the API gateway."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Wrap the WSGI app in :class:`ProxyFix` for ``PROXY_HOPS`` proxies.

    With ``PROXY_HOPS = 0`` the forwarded headers are ignored and
    ``request.remote_addr`` is the direct peer.
    """
    hops = int(app.config.get("PROXY_HOPS", 1))
    if hops > 0:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops, x_prefix=hops)
