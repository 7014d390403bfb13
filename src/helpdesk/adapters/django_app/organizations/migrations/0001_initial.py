"""
Migration inicial para o domínio de Organizações.

Cria as tabelas:
- organizations: Tenants
- user_organizations: Associação usuário ↔ organização
"""

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        # =================================================================
        # Tabela: organizations
        # =================================================================
        migrations.CreateModel(
            name='OrganizationModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único da organização'
                )),
                ('name', models.CharField(
                    max_length=200,
                    help_text='Nome de exibição'
                )),
                ('slug', models.SlugField(
                    max_length=100,
                    unique=True,
                    help_text='Identificador usado nas URLs'
                )),
                ('theme_primary_color', models.CharField(max_length=7, default='#1a365d')),
                ('theme_secondary_color', models.CharField(max_length=7, default='#2d3748')),
                ('theme_accent_color', models.CharField(max_length=7, default='#4299e1')),
                ('logo_url', models.CharField(
                    max_length=500,
                    null=True,
                    blank=True,
                    help_text='Referência ao logo'
                )),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'db_table': 'organizations',
                'verbose_name': 'Organização',
                'verbose_name_plural': 'Organizações',
                'ordering': ['name'],
            },
        ),

        # =================================================================
        # Tabela: user_organizations
        # =================================================================
        migrations.CreateModel(
            name='MembershipModel',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('role', models.CharField(
                    max_length=20,
                    choices=[('admin', 'Administrador'), ('member', 'Membro')],
                    default='member',
                )),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('organization', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='memberships',
                    to='organizations.organizationmodel',
                )),
                ('user', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='organization_memberships',
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                'db_table': 'user_organizations',
                'verbose_name': 'Associação',
                'verbose_name_plural': 'Associações',
            },
        ),
        migrations.AddConstraint(
            model_name='membershipmodel',
            constraint=models.UniqueConstraint(
                fields=('user', 'organization'),
                name='unique_user_organization',
            ),
        ),
    ]
