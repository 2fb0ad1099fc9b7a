"""JSON views for the graph and media type configuration forms.

Form endpoints (GET) return the render state a client needs to draw the form
for the values given in the query string. Submit endpoints (POST) validate
and persist, answering with either a success message or the failure header
plus the ordered detail messages.

Submit endpoints stay behind CSRF protection. The form endpoints set the
`csrftoken` cookie, and clients send it back in the `X-CSRFToken` header.
"""

from __future__ import annotations

import logging
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from core.exceptions import GraphRejectedError, MediaTypeRejectedError
from core.forms import GraphForm, MediaTypeForm
from core.models import Graph, MediaType
from core.services import (
    graph_item_rows,
    graph_values,
    media_type_values,
    save_graph,
    save_media_type,
)
from formrules import messages
from formrules.render_state import GraphFormSession, MediaTypeFormSession, UnknownFieldError

logger = logging.getLogger(__name__)

_RESERVED_QUERY_KEYS = frozenset({"graphid", "mediatypeid", "clone"})


def _failure(header: str, details: Any, *, status: int = 400) -> JsonResponse:
    return JsonResponse({"ok": False, "error": header, "details": [str(detail) for detail in details]}, status=status)


def _query_values(request: HttpRequest) -> dict[str, str]:
    return {key: value for key, value in request.GET.items() if key not in _RESERVED_QUERY_KEYS}


def _entity_title(*, prototype: bool) -> str:
    return "Graph prototype" if prototype else "Graph"


def _graph_form(request: HttpRequest, *, prototype: bool) -> JsonResponse:
    graph: Graph | None = None
    graph_id = request.GET.get("graphid")
    if graph_id:
        graph = get_object_or_404(Graph, pk=graph_id, is_prototype=prototype)

    session = GraphFormSession(graph_values(graph) if graph is not None else None, prototype=prototype)
    try:
        session.fill(_query_values(request))
    except UnknownFieldError as exc:
        return _failure(messages.FIELD_ERROR_HEADER, [f'Field "{exc.args[0]}" is not part of this form.'])

    return JsonResponse(
        {
            "title": "Graph prototypes" if prototype else "Graphs",
            "tabs": [_entity_title(prototype=prototype), "Preview"],
            "graphid": graph.pk if graph is not None else None,
            "fields": session.state().as_dict(),
            "item_columns": list(session.item_columns()),
            "items": graph_item_rows(graph) if graph is not None else [],
            "buttons": ["update", "clone", "delete", "cancel"] if graph is not None else ["add", "cancel"],
        }
    )


def _graph_submit(request: HttpRequest, *, prototype: bool, graph: Graph | None = None) -> JsonResponse:
    update = graph is not None
    form = GraphForm(request.POST, prototype=prototype)
    if not form.is_valid() or form.graph_config is None:
        details = form.non_field_errors() or [str(error) for errors in form.errors.values() for error in errors]
        logger.info("Rejected %s submission: %s", _entity_title(prototype=prototype).lower(), list(details))
        return _failure(messages.FIELD_ERROR_HEADER, details)

    try:
        saved = save_graph(form.graph_config, graph=graph)
    except GraphRejectedError as exc:
        return _failure(exc.header, exc.details)

    verb = "updated" if update else "added"
    return JsonResponse(
        {
            "ok": True,
            "message": f"{_entity_title(prototype=prototype)} {verb}",
            "graphid": saved.pk,
        }
    )


@require_GET
@ensure_csrf_cookie
def graph_form(request: HttpRequest) -> JsonResponse:
    """Return the graph form render state for the queried values."""

    return _graph_form(request, prototype=False)


@require_POST
def graph_create(request: HttpRequest) -> JsonResponse:
    """Validate and store a new graph."""

    return _graph_submit(request, prototype=False)


@require_POST
def graph_update(request: HttpRequest, graph_id: int) -> JsonResponse:
    """Validate and store changes to an existing graph."""

    graph = get_object_or_404(Graph, pk=graph_id, is_prototype=False)
    return _graph_submit(request, prototype=False, graph=graph)


@require_GET
@ensure_csrf_cookie
def graph_prototype_form(request: HttpRequest) -> JsonResponse:
    """Return the graph prototype form render state for the queried values."""

    return _graph_form(request, prototype=True)


@require_POST
def graph_prototype_create(request: HttpRequest) -> JsonResponse:
    """Validate and store a new graph prototype."""

    return _graph_submit(request, prototype=True)


@require_POST
def graph_prototype_update(request: HttpRequest, graph_id: int) -> JsonResponse:
    """Validate and store changes to an existing graph prototype."""

    graph = get_object_or_404(Graph, pk=graph_id, is_prototype=True)
    return _graph_submit(request, prototype=True, graph=graph)


@require_GET
@ensure_csrf_cookie
def media_type_form(request: HttpRequest) -> JsonResponse:
    """Return the media type form render state.

    `mediatypeid` loads an existing media type; adding `clone=1` turns it into
    a new one with the same settings. Any other query key sets a field, and
    `type` switches the media type (clearing the groups it hides).
    """

    media_type: MediaType | None = None
    media_type_id = request.GET.get("mediatypeid")
    if media_type_id:
        media_type = get_object_or_404(MediaType, pk=media_type_id)

    session = MediaTypeFormSession(
        media_type_values(media_type) if media_type is not None else None,
        mediatypeid=media_type.pk if media_type is not None else None,
    )
    if request.GET.get("clone"):
        session.clone()

    values = _query_values(request)
    try:
        if "type" in values:
            session.change_type(values.pop("type"))
        for key, value in values.items():
            session.set(key, value)
    except UnknownFieldError as exc:
        return _failure(messages.FIELD_ERROR_HEADER, [f'Field "{exc.args[0]}" is not part of this form.'])
    except ValueError as exc:
        return _failure(messages.FIELD_ERROR_HEADER, [str(exc)])

    return JsonResponse(
        {
            "title": "Media types",
            "mediatypeid": session.mediatypeid,
            "fields": session.state().as_dict(),
            "buttons": list(session.actions),
            "submit_label": session.submit_label,
            "submit_action": session.submit_action,
        }
    )


def _media_type_submit(request: HttpRequest, *, media_type: MediaType | None = None) -> JsonResponse:
    update = media_type is not None
    form = MediaTypeForm(request.POST)
    if not form.is_valid():
        return _failure(messages.FIELD_ERROR_HEADER, form.non_field_errors())

    try:
        saved = save_media_type(form.submission, media_type=media_type)
    except MediaTypeRejectedError as exc:
        return _failure(exc.header, exc.details)

    return JsonResponse(
        {
            "ok": True,
            "message": "Media type updated" if update else "Media type added",
            "mediatypeid": saved.pk,
        }
    )


@require_POST
def media_type_create(request: HttpRequest) -> JsonResponse:
    """Validate and store a new media type."""

    return _media_type_submit(request)


@require_POST
def media_type_update(request: HttpRequest, media_type_id: int) -> JsonResponse:
    """Validate and store changes to an existing media type."""

    media_type = get_object_or_404(MediaType, pk=media_type_id)
    return _media_type_submit(request, media_type=media_type)
