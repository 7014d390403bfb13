"""
URL patterns para o domínio de Tickets.

Endpoints API JSON (montados em /api/):
- GET   <slug>/tickets/ - Buscar tickets
- POST  <slug>/tickets/ - Criar ticket
- GET   <slug>/tickets/<id>/ - Obter ticket
- PATCH <slug>/tickets/<id>/ - Atualizar ticket
- POST  <slug>/tickets/<id>/atribuir/ - Atribuir ticket
- GET   <slug>/dashboard/ - Estatísticas
- POST  <slug>/anexos/ - Upload de anexos
- GET   notificacoes/ - Notificações do usuário
- POST  notificacoes/<ticket_id>/abrir/ - Abrir notificação
"""

from django.urls import path

from . import api_views

app_name = 'tickets'

urlpatterns = [
    # Notificações (antes do <slug> para não conflitar)
    path('notificacoes/', api_views.NotificacoesAPIView.as_view(), name='api_notificacoes'),
    path(
        'notificacoes/<str:ticket_id>/abrir/',
        api_views.AbrirNotificacaoAPIView.as_view(),
        name='api_abrir_notificacao'
    ),

    # Escopados por organização
    path('<slug:slug>/tickets/', api_views.TicketAPIListView.as_view(), name='api_list'),
    path('<slug:slug>/tickets/<str:pk>/', api_views.TicketAPIDetailView.as_view(), name='api_detail'),
    path(
        '<slug:slug>/tickets/<str:pk>/atribuir/',
        api_views.TicketAPIAtribuirView.as_view(),
        name='api_atribuir'
    ),
    path('<slug:slug>/dashboard/', api_views.DashboardAPIView.as_view(), name='api_dashboard'),
    path('<slug:slug>/anexos/', api_views.AnexosAPIView.as_view(), name='api_anexos'),
]
