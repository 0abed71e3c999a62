"""
app/connectors package marker.
"""

from app.connectors.base import BaseConnector, ConnectorRequestError
from app.connectors.identity_graph_connector import (
    IdentityGraphConnector,
    build_auth_header,
    extract_fields,
)

__all__ = [
    "BaseConnector",
    "ConnectorRequestError",
    "IdentityGraphConnector",
    "build_auth_header",
    "extract_fields",
]
