"""
Schemas module - Request/Response schemas for API endpoints.
"""

from app.schemas.schemas import UserRole

__all__ = ["UserRole"]
