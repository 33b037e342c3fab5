"""
Books API Application Package

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: Connection pool, connection leases and worker-thread offload
- errors.py: Error types mapped onto HTTP status codes
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Single-statement book queries
"""

__version__ = "0.1.0"
