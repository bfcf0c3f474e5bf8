"""Identity Admin API package.

A small Flask backend that signs in a single administrator and proxies
identity, session and schema management to Ory Kratos.

To build the Flask app:
    from identity_admin.flask_app import create_app

To use the Kratos client library directly:
    from identity_admin.core.kratos import KratosGateway, KratosClient
"""
__version__ = "1.0.0"
