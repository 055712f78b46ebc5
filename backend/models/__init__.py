"""
Pydantic models for Pagesmith.

All data shapes defined here. No imports from services or routes.
"""

from backend.models.session import (
    AddElementRequest,
    CommandResponse,
    CreateSessionRequest,
    DocumentRequest,
    FormattingRequest,
    MarkupResponse,
    MoveElementRequest,
    SelectionRequest,
    SessionResponse,
    SetTemplateRequest,
    UpdateElementRequest,
    ViewportRequest,
)

__all__ = [
    # Session models
    "CreateSessionRequest",
    "SessionResponse",
    "CommandResponse",
    # Element models
    "AddElementRequest",
    "UpdateElementRequest",
    "MoveElementRequest",
    "FormattingRequest",
    "MarkupResponse",
    # View models
    "SetTemplateRequest",
    "SelectionRequest",
    "ViewportRequest",
    # Document models
    "DocumentRequest",
]
