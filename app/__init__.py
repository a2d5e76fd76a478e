"""
Placement Portal
Placement management for students, coordinators and admins.

Architecture:
- MongoDB: users and companies
- FastAPI: JWT-authenticated REST API with role-gated mutations
- app.client: Python front-end tier (API client, tables, confirmation workflow)
"""

__version__ = "1.0.0"
