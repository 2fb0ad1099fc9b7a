"""Admin registrations for the core app."""

from __future__ import annotations

from django.contrib import admin

from core.models import Graph, GraphItem, Host, Item, MediaType


@admin.register(Host)
class HostAdmin(admin.ModelAdmin):
    """Admin configuration for Host."""

    list_display = ("name",)
    search_fields = ("name",)


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    """Admin configuration for Item."""

    list_display = ("name", "host", "key", "is_prototype")
    list_filter = ("is_prototype",)
    search_fields = ("name", "key", "host__name")


class GraphItemInline(admin.TabularInline):
    model = GraphItem
    extra = 0
    fields = ("sortorder", "item", "calc_fnc", "drawtype", "yaxisside", "type", "color")


@admin.register(Graph)
class GraphAdmin(admin.ModelAdmin):
    """Admin configuration for Graph."""

    list_display = ("name", "graphtype", "width", "height", "is_prototype", "created_at")
    list_filter = ("graphtype", "is_prototype")
    search_fields = ("name",)
    inlines = (GraphItemInline,)


@admin.register(MediaType)
class MediaTypeAdmin(admin.ModelAdmin):
    """Admin configuration for MediaType."""

    list_display = ("name", "type")
    list_filter = ("type",)
    search_fields = ("name",)
