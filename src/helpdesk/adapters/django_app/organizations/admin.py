"""
Django Admin para Organizações e associações.
"""

import uuid

from django.contrib import admin
from django.utils.html import format_html

from .models import MembershipModel, OrganizationModel


class MembershipInline(admin.TabularInline):
    model = MembershipModel
    extra = 0


@admin.register(OrganizationModel)
class OrganizationAdmin(admin.ModelAdmin):
    """Admin para OrganizationModel."""

    list_display = ['name', 'slug', 'tema', 'created_at']
    search_fields = ['name', 'slug']
    readonly_fields = ['id', 'created_at']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [MembershipInline]

    fieldsets = [
        ('Identificação', {
            'fields': ['id', 'name', 'slug', 'logo_url'],
        }),
        ('Tema', {
            'fields': ['theme_primary_color', 'theme_secondary_color', 'theme_accent_color'],
        }),
        ('Timestamps', {
            'fields': ['created_at'],
            'classes': ['collapse'],
        }),
    ]

    def tema(self, obj):
        """Exibe as três cores do tema."""
        return format_html(
            ''.join(
                '<span style="display:inline-block;width:14px;height:14px;'
                'background:{};margin-right:2px;"></span>'
                for _ in range(3)
            ),
            obj.theme_primary_color,
            obj.theme_secondary_color,
            obj.theme_accent_color,
        )
    tema.short_description = 'Tema'

    def save_model(self, request, obj, form, change):
        if not obj.id:
            obj.id = str(uuid.uuid4())
        super().save_model(request, obj, form, change)


@admin.register(MembershipModel)
class MembershipAdmin(admin.ModelAdmin):
    list_display = ['user', 'organization', 'role', 'created_at']
    list_filter = ['role', 'organization']
    search_fields = ['user__email', 'user__username', 'organization__slug']
