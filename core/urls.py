"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("graphs/form/", views.graph_form, name="graph_form"),
    path("graphs/create/", views.graph_create, name="graph_create"),
    path("graphs/<int:graph_id>/update/", views.graph_update, name="graph_update"),
    path("graph-prototypes/form/", views.graph_prototype_form, name="graph_prototype_form"),
    path("graph-prototypes/create/", views.graph_prototype_create, name="graph_prototype_create"),
    path(
        "graph-prototypes/<int:graph_id>/update/",
        views.graph_prototype_update,
        name="graph_prototype_update",
    ),
    path("media-types/form/", views.media_type_form, name="media_type_form"),
    path("media-types/create/", views.media_type_create, name="media_type_create"),
    path("media-types/<int:media_type_id>/update/", views.media_type_update, name="media_type_update"),
]
