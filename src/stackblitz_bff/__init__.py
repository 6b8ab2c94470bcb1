"""
StackBlitz BFF.

Exposes the StackBlitz REST API (projects and users) as a GraphQL API with
global object identification and cursor-based connections.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
