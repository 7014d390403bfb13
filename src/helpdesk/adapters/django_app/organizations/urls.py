"""
URL patterns para Organizações e Usuários (montados em /api/).
"""

from django.urls import path

from . import api_views

app_name = 'organizations'

urlpatterns = [
    path('organizacoes/', api_views.OrganizacoesAPIView.as_view(), name='api_list'),
    path(
        'organizacoes/<slug:slug>/',
        api_views.SelecionarOrganizacaoAPIView.as_view(),
        name='api_selecionar'
    ),
    path('usuarios/', api_views.UsuariosAPIView.as_view(), name='api_usuarios'),
]
