"""Core Business Logic Module

This module provides the core logic for the identity admin API,
independent of the HTTP framework.

Module Structure:
    - kratos/         : Kratos admin/public API client and services
    - tokens.py       : Admin bearer token issuance and validation
    - validators.py   : Request payload and query parameter validation

Usage Pattern:
    Import explicitly when needed:
        from identity_admin.core.kratos import KratosGateway, NotFoundError
        from identity_admin.core.tokens import TokenService, AuthenticationError
        from identity_admin.core.validators import parse_pagination, ValidationError
"""
