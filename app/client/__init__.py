"""
Client tier - talks to the API and drives the student/company grids.
"""

from app.client.api import ApiError, PlacementApiClient
from app.client.confirmation import ConfirmAction, ConfirmationWorkflow, WorkflowState

__all__ = [
    "ApiError",
    "PlacementApiClient",
    "ConfirmAction",
    "ConfirmationWorkflow",
    "WorkflowState",
]
