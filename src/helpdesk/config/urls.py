"""
URL Configuration para o Helpdesk.

Estrutura:
- /admin/ - Django Admin
- /api/organizacoes/, /api/usuarios/ - Organizações e usuários
- /api/<slug>/... e /api/notificacoes/ - Tickets
- /health/ - Health check
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path


def health(request):
    return JsonResponse({'status': 'ok'})


urlpatterns = [
    path('admin/', admin.site.urls),

    path('api/', include('helpdesk.adapters.django_app.organizations.urls')),
    path('api/', include('helpdesk.adapters.django_app.tickets.urls')),

    path('health/', health, name='health'),
]

# Servir anexos em desenvolvimento
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
