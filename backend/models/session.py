"""Editing session models for the HTTP surface."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from engine.editor.session import EditingSession

TemplateId = Literal["basic", "portfolio", "business"]
ViewportMode = Literal["desktop", "tablet", "mobile"]
FormFieldType = Literal["text", "email", "textarea"]


class CreateSessionRequest(BaseModel):
    """What the client sends to POST /api/sessions."""

    model_config = {"extra": "forbid"}

    template_id: TemplateId = "basic"


class SessionResponse(BaseModel):
    """A session's current state plus history availability."""

    session_id: str
    state: dict[str, Any]
    can_undo: bool
    can_redo: bool
    recent_kinds: list[str]

    @classmethod
    def from_session(cls, session_id: str, session: EditingSession) -> SessionResponse:
        return cls(
            session_id=session_id,
            state=session.state,
            can_undo=session.can_undo,
            can_redo=session.can_redo,
            recent_kinds=session.recent_kinds,
        )


class CommandResponse(BaseModel):
    """What every mutating endpoint returns. `applied` is False for no-ops."""

    applied: bool
    state: dict[str, Any]
    can_undo: bool
    can_redo: bool
    element_id: str | None = None  # id created by the command, if any

    @classmethod
    def from_session(cls, session: EditingSession, applied: bool, element_id: str | None = None) -> CommandResponse:
        return cls(
            applied=applied,
            state=session.state,
            can_undo=session.can_undo,
            can_redo=session.can_redo,
            element_id=element_id,
        )


class AddElementRequest(BaseModel):
    """Add a default element of `kind` to a container."""

    model_config = {"extra": "forbid"}

    kind: str = Field(min_length=1, max_length=50)
    container_id: str = Field(min_length=1)


class UpdateElementRequest(BaseModel):
    """Partial element update; `style` is merged key by key."""

    model_config = {"extra": "forbid"}

    updates: dict[str, Any]


class MoveElementRequest(BaseModel):
    model_config = {"extra": "forbid"}

    from_container_id: str = Field(min_length=1)
    to_container_id: str = Field(min_length=1)
    index: int | None = None  # None = append


class FormattingRequest(BaseModel):
    """Format content[start:end]. All flags off clears formatting from the span."""

    model_config = {"extra": "forbid"}

    start: int = Field(ge=0)
    end: int = Field(ge=0)
    formatting: dict[str, bool] = Field(default_factory=dict)


class TableSizeRequest(BaseModel):
    """Resize a table; each dimension is 1..20."""

    model_config = {"extra": "forbid"}

    rows: int = Field(ge=1, le=20)
    columns: int = Field(ge=1, le=20)


class GalleryImageRequest(BaseModel):
    model_config = {"extra": "forbid"}

    src: str = Field(min_length=1)
    alt: str = ""


class FormFieldRequest(BaseModel):
    model_config = {"extra": "forbid"}

    field_type: FormFieldType = "text"
    label: str = "New Field"
    placeholder: str = ""
    required: bool = False


class MarkupResponse(BaseModel):
    element_id: str
    markup: str


class SetTemplateRequest(BaseModel):
    model_config = {"extra": "forbid"}

    template_id: str = Field(min_length=1)


class SelectionRequest(BaseModel):
    """Select an element or a container. Both null clears the selection."""

    model_config = {"extra": "forbid"}

    element_id: str | None = None
    container_id: str | None = None


class ViewportRequest(BaseModel):
    model_config = {"extra": "forbid"}

    mode: ViewportMode


class DocumentRequest(BaseModel):
    """A whole document for PUT /api/sessions/{id}/document."""

    model_config = {"extra": "forbid"}

    elements: dict[str, Any]
    containers: dict[str, Any]
    templates: list[dict[str, Any]]
    current_template_id: str | None = None
