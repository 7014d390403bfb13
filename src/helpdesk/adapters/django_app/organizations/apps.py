"""
Configuração do Django App para Organizações (tenants).
"""

from django.apps import AppConfig


class OrganizationsConfig(AppConfig):
    """Configuração do app Organizações."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'helpdesk.adapters.django_app.organizations'
    label = 'organizations'
    verbose_name = 'Organizações'
