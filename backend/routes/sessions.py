"""Editing session routes - create, inspect, edit, undo/redo, load/export."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response, status

from backend.models.session import (
    AddElementRequest,
    CommandResponse,
    CreateSessionRequest,
    DocumentRequest,
    FormFieldRequest,
    FormattingRequest,
    GalleryImageRequest,
    MarkupResponse,
    MoveElementRequest,
    SelectionRequest,
    SessionResponse,
    SetTemplateRequest,
    TableSizeRequest,
    UpdateElementRequest,
    ViewportRequest,
)
from backend.services.session_registry import session_registry
from engine.editor.session import EditingSession

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


def get_session(session_id: str) -> EditingSession:
    """Resolve the session in the path or 404."""
    session = session_registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found.")
    return session


# ── sessions ────────────────────────────────────────────────────────────────


@router.post("", status_code=201)
async def create_session(req: CreateSessionRequest | None = None) -> SessionResponse:
    """Start a new editing session on the built-in templates."""
    req = req or CreateSessionRequest()
    session_id, session = session_registry.create(req.template_id)
    return SessionResponse.from_session(session_id, session)


@router.get("/{session_id}", status_code=200)
async def get_session_state(session_id: str, session: EditingSession = Depends(get_session)) -> SessionResponse:
    return SessionResponse.from_session(session_id, session)


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str) -> Response:
    if not session_registry.remove(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── elements ────────────────────────────────────────────────────────────────


@router.post("/{session_id}/elements", status_code=200)
async def add_element(req: AddElementRequest, session: EditingSession = Depends(get_session)) -> CommandResponse:
    """Add a default element of the requested kind. `element_id` is the new id."""
    element_id = session.add_element(req.kind, req.container_id)
    return CommandResponse.from_session(session, element_id is not None, element_id)


@router.patch("/{session_id}/elements/{element_id}", status_code=200)
async def update_element(
    element_id: str,
    req: UpdateElementRequest,
    session: EditingSession = Depends(get_session),
) -> CommandResponse:
    applied = session.update_element(element_id, req.updates)
    return CommandResponse.from_session(session, applied)


@router.delete("/{session_id}/elements/{element_id}", status_code=200)
async def delete_element(element_id: str, session: EditingSession = Depends(get_session)) -> CommandResponse:
    applied = session.delete_element(element_id)
    return CommandResponse.from_session(session, applied)


@router.post("/{session_id}/elements/{element_id}/duplicate", status_code=200)
async def duplicate_element(element_id: str, session: EditingSession = Depends(get_session)) -> CommandResponse:
    """Clone an element at the end of its container. `element_id` is the clone's id."""
    new_id = session.duplicate_element(element_id)
    return CommandResponse.from_session(session, new_id is not None, new_id)


@router.post("/{session_id}/elements/{element_id}/move", status_code=200)
async def move_element(
    element_id: str,
    req: MoveElementRequest,
    session: EditingSession = Depends(get_session),
) -> CommandResponse:
    applied = session.move_element(element_id, req.from_container_id, req.to_container_id, req.index)
    return CommandResponse.from_session(session, applied)


@router.post("/{session_id}/elements/{element_id}/formatting", status_code=200)
async def apply_formatting(
    element_id: str,
    req: FormattingRequest,
    session: EditingSession = Depends(get_session),
) -> CommandResponse:
    applied = session.apply_formatting(element_id, req.start, req.end, req.formatting)
    return CommandResponse.from_session(session, applied)


@router.get("/{session_id}/elements/{element_id}/markup", status_code=200)
async def get_markup(element_id: str, session: EditingSession = Depends(get_session)) -> MarkupResponse:
    """Rendered markup of a heading or paragraph."""
    markup = session.render_text(element_id)
    if markup is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Text element not found.")
    return MarkupResponse(element_id=element_id, markup=markup)


@router.put("/{session_id}/elements/{element_id}/table", status_code=200)
async def resize_table(
    element_id: str,
    req: TableSizeRequest,
    session: EditingSession = Depends(get_session),
) -> CommandResponse:
    applied = session.resize_table(element_id, req.rows, req.columns)
    return CommandResponse.from_session(session, applied)


@router.post("/{session_id}/elements/{element_id}/images", status_code=200)
async def add_gallery_image(
    element_id: str,
    req: GalleryImageRequest,
    session: EditingSession = Depends(get_session),
) -> CommandResponse:
    """Append an image to a gallery. `element_id` in the response is the image id."""
    image_id = session.add_gallery_image(element_id, req.src, req.alt)
    return CommandResponse.from_session(session, image_id is not None, image_id)


@router.delete("/{session_id}/elements/{element_id}/images/{image_id}", status_code=200)
async def remove_gallery_image(
    element_id: str,
    image_id: str,
    session: EditingSession = Depends(get_session),
) -> CommandResponse:
    applied = session.remove_gallery_image(element_id, image_id)
    return CommandResponse.from_session(session, applied)


@router.post("/{session_id}/elements/{element_id}/fields", status_code=200)
async def add_form_field(
    element_id: str,
    req: FormFieldRequest,
    session: EditingSession = Depends(get_session),
) -> CommandResponse:
    """Append a field to a form. `element_id` in the response is the field id."""
    field_id = session.add_form_field(element_id, req.field_type, req.label, req.placeholder, req.required)
    return CommandResponse.from_session(session, field_id is not None, field_id)


@router.delete("/{session_id}/elements/{element_id}/fields/{field_id}", status_code=200)
async def remove_form_field(
    element_id: str,
    field_id: str,
    session: EditingSession = Depends(get_session),
) -> CommandResponse:
    applied = session.remove_form_field(element_id, field_id)
    return CommandResponse.from_session(session, applied)


# ── view ────────────────────────────────────────────────────────────────────


@router.post("/{session_id}/template", status_code=200)
async def set_template(req: SetTemplateRequest, session: EditingSession = Depends(get_session)) -> CommandResponse:
    applied = session.set_template(req.template_id)
    return CommandResponse.from_session(session, applied)


@router.post("/{session_id}/selection", status_code=200)
async def set_selection(req: SelectionRequest, session: EditingSession = Depends(get_session)) -> CommandResponse:
    """Select a container if one is given, otherwise an element (null clears)."""
    if req.container_id is not None:
        applied = session.select_container(req.container_id)
    else:
        applied = session.select_element(req.element_id)
    return CommandResponse.from_session(session, applied)


@router.post("/{session_id}/preview", status_code=200)
async def toggle_preview(session: EditingSession = Depends(get_session)) -> CommandResponse:
    applied = session.toggle_preview_mode()
    return CommandResponse.from_session(session, applied)


@router.post("/{session_id}/viewport", status_code=200)
async def set_viewport(req: ViewportRequest, session: EditingSession = Depends(get_session)) -> CommandResponse:
    applied = session.set_viewport(req.mode)
    return CommandResponse.from_session(session, applied)


# ── history ─────────────────────────────────────────────────────────────────


@router.post("/{session_id}/undo", status_code=200)
async def undo(session: EditingSession = Depends(get_session)) -> CommandResponse:
    applied = session.undo()
    return CommandResponse.from_session(session, applied)


@router.post("/{session_id}/redo", status_code=200)
async def redo(session: EditingSession = Depends(get_session)) -> CommandResponse:
    applied = session.redo()
    return CommandResponse.from_session(session, applied)


# ── document ────────────────────────────────────────────────────────────────


@router.get("/{session_id}/document", status_code=200)
async def export_document(session: EditingSession = Depends(get_session)) -> dict[str, Any]:
    """Persistable document: elements, containers, templates, current template."""
    return session.export_document()


@router.put("/{session_id}/document", status_code=200)
async def load_document(req: DocumentRequest, session: EditingSession = Depends(get_session)) -> CommandResponse:
    """Replace the document. A document that breaks containment is not applied."""
    applied = session.load_document(req.model_dump())
    return CommandResponse.from_session(session, applied)
