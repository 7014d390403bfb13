"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events de forma assíncrona
- Notificações de atribuição (email, push, etc)
- Relatório diário por organização

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)

Uso:
    celery -A helpdesk.config.celery worker -l INFO
    celery -A helpdesk.config.celery beat -l INFO
"""

import os

from celery import Celery
from celery.schedules import crontab
from kombu import Exchange, Queue

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'helpdesk.config.settings')

app = Celery('helpdesk')

# Configurações CELERY_* vêm do Django settings
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',

    # Monitoramento
    worker_send_task_events=True,
    task_send_sent_event=True,
)

# Definir filas
app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('notifications', Exchange('notifications'), routing_key='notifications.#'),
    Queue('reports', Exchange('reports'), routing_key='reports.#'),
)
app.conf.task_default_queue = 'default'

_HANDLERS = 'helpdesk.adapters.django_app.events.handlers'

# Roteamento de tarefas para filas
app.conf.task_routes = {
    f'{_HANDLERS}.notify_user': {'queue': 'notifications'},
    f'{_HANDLERS}.generate_daily_report': {'queue': 'reports'},
    f'{_HANDLERS}.*': {'queue': 'events'},
}

app.autodiscover_tasks(['helpdesk.adapters.django_app.events'], related_name='handlers')

# Tarefas agendadas (beat)
app.conf.beat_schedule = {
    # Relatório diário às 8h
    'daily-report': {
        'task': f'{_HANDLERS}.generate_daily_report',
        'schedule': crontab(hour=8, minute=0),
    },
}
