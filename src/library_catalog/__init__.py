"""
Library Catalog service.

A library catalog (authors, books, publishers, clients and loans) served over
REST, with filterable list and count queries built from per-entity criteria.

Key Components:
- models: Pydantic entity records
- database: SQLAlchemy schema, sessions and repositories
- query: filters, criteria and query services
- api: FastAPI application
- config: Configuration management with Pydantic v2
"""

__version__ = "0.1.0"
