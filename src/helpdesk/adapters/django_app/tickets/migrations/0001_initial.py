"""
Migration inicial para o domínio de Tickets.

Cria as tabelas:
- tickets: Tabela principal de tickets
- ticket_attachments: Anexos
- ticket_sequences: Sequência de ticket_no por organização
- assignment_notifications: Notificações de atribuição
"""

import datetime

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
        ('organizations', '0001_initial'),
    ]

    operations = [
        # =================================================================
        # Tabela: tickets
        # =================================================================
        migrations.CreateModel(
            name='TicketModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do ticket'
                )),
                ('ticket_no', models.CharField(
                    max_length=20,
                    help_text='Número legível (sequência da organização)'
                )),
                ('created_on', models.DateField(default=datetime.date.today)),
                ('opened_by', models.CharField(
                    max_length=254,
                    help_text='Email de quem abriu o ticket'
                )),
                ('client_file_no', models.CharField(max_length=100)),
                ('mobile_no', models.CharField(max_length=30)),
                ('name_of_client', models.CharField(max_length=200)),
                ('issue_type', models.CharField(max_length=100)),
                ('description', models.TextField()),
                ('resolution', models.TextField(blank=True, default='')),
                ('status', models.CharField(
                    max_length=20,
                    choices=[
                        ('open', 'Aberto'),
                        ('in_progress', 'Em Progresso'),
                        ('closed', 'Fechado'),
                    ],
                    default='open',
                    db_index=True,
                    help_text='Estado atual do ticket'
                )),
                ('closed_on', models.DateField(null=True, blank=True)),
                ('closed_by', models.CharField(max_length=254, null=True, blank=True)),
                ('assigned_to', models.CharField(
                    max_length=100,
                    null=True,
                    blank=True,
                    db_index=True,
                    help_text='ID do usuário responsável'
                )),
                ('created_at', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True
                )),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('responded_at', models.DateTimeField(
                    null=True,
                    blank=True,
                    help_text='Primeira saída do status open'
                )),
                ('organization', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='tickets',
                    to='organizations.organizationmodel',
                    help_text='Organização dona do ticket'
                )),
            ],
            options={
                'db_table': 'tickets',
                'verbose_name': 'Ticket',
                'verbose_name_plural': 'Tickets',
                'ordering': ['-created_on', '-created_at'],
            },
        ),
        migrations.AddConstraint(
            model_name='ticketmodel',
            constraint=models.UniqueConstraint(
                fields=('organization', 'ticket_no'),
                name='unique_ticket_no_per_organization',
            ),
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(fields=['organization', 'status'], name='tickets_org_status_idx'),
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(fields=['organization', 'created_on'], name='tickets_org_created_idx'),
        ),

        # =================================================================
        # Tabela: ticket_attachments
        # =================================================================
        migrations.CreateModel(
            name='TicketAttachmentModel',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('size', models.PositiveIntegerField(help_text='Tamanho em bytes')),
                ('mime_type', models.CharField(max_length=100)),
                ('url', models.CharField(max_length=500)),
                ('position', models.PositiveSmallIntegerField(default=0)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='attachments',
                    to='tickets.ticketmodel',
                )),
            ],
            options={
                'db_table': 'ticket_attachments',
                'verbose_name': 'Anexo',
                'verbose_name_plural': 'Anexos',
                'ordering': ['position', 'id'],
            },
        ),

        # =================================================================
        # Tabela: ticket_sequences
        # =================================================================
        migrations.CreateModel(
            name='TicketSequenceModel',
            fields=[
                ('organization', models.OneToOneField(
                    on_delete=django.db.models.deletion.CASCADE,
                    primary_key=True,
                    serialize=False,
                    related_name='ticket_sequence',
                    to='organizations.organizationmodel',
                )),
                ('last_value', models.PositiveIntegerField(default=0)),
            ],
            options={
                'db_table': 'ticket_sequences',
                'verbose_name': 'Sequência de Tickets',
                'verbose_name_plural': 'Sequências de Tickets',
            },
        ),

        # =================================================================
        # Tabela: assignment_notifications
        # =================================================================
        migrations.CreateModel(
            name='AssignmentNotificationModel',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('user_id', models.CharField(max_length=100, db_index=True)),
                ('read', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('read_at', models.DateTimeField(null=True, blank=True)),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='notifications',
                    to='tickets.ticketmodel',
                )),
            ],
            options={
                'db_table': 'assignment_notifications',
                'verbose_name': 'Notificação de Atribuição',
                'verbose_name_plural': 'Notificações de Atribuição',
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='assignmentnotificationmodel',
            index=models.Index(fields=['user_id', 'read'], name='notif_user_read_idx'),
        ),
    ]
