"""WSGI entry point (``gunicorn identity_admin.wsgi:app``)."""
from identity_admin.flask_app import create_app

app = create_app()
