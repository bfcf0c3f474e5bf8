"""Gunicorn configuration file.

Run with:
    gunicorn -c gunicorn.conf.py

Each sync worker serves one request at a time; requests share nothing but the
immutable config, so workers and threads scale without coordination.
"""
import os

wsgi_app = "identity_admin.wsgi:app"
bind = f"0.0.0.0:{os.environ.get('PORT', '8080')}"
workers = int(os.environ.get("GUNICORN_WORKERS", "2"))
threads = int(os.environ.get("GUNICORN_THREADS", "4"))
# Upper bound on a request; upstream calls carry their own shorter timeout
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "30"))
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"


def post_fork(server, worker):
    """
    Called just after a worker has been forked.

    Logs where the two required secrets come from so misconfigured
    deployments are obvious in the worker log. Values are never logged.
    """
    from pathlib import Path

    secrets_dir = Path("/run/secrets")
    for env_name, secret_name in (("ADMIN_PASSWORD", "admin_password"), ("JWT_SECRET", "jwt_secret")):
        if (secrets_dir / secret_name).is_file():
            worker.log.info(f"{env_name} provided via /run/secrets/{secret_name}")
        elif os.environ.get(env_name):
            worker.log.info(f"{env_name} provided via environment")
        else:
            worker.log.error(f"{env_name} missing; the application will refuse to start")
