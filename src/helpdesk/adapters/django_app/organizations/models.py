"""
Django Models para o domínio de Organizações.

Estes models são ADAPTERS - implementam a persistência para as
entidades definidas em helpdesk/core/organizations/entities.py.

Relacionamentos:
- OrganizationModel: Tenants
- MembershipModel: Associação N:N usuário ↔ organização
  (usuários vêm de django.contrib.auth)
"""

from django.conf import settings
from django.db import models
from django.utils import timezone


class MembershipRoleChoices(models.TextChoices):
    """Choices para papel na organização (espelha MembershipRole do Core)."""
    ADMIN = 'admin', 'Administrador'
    MEMBER = 'member', 'Membro'


class OrganizationModel(models.Model):
    """
    Model Django para persistência de Organizações.

    Fields:
        id: UUID como primary key (gerado pela Entity)
        name: Nome de exibição
        slug: Identificador único usado nas URLs
        theme_*_color: Cores do tema (hex)
        logo_url: Logo opcional
        created_at: Timestamp de criação
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único da organização"
    )

    name = models.CharField(
        max_length=200,
        help_text="Nome de exibição"
    )

    slug = models.SlugField(
        max_length=100,
        unique=True,
        help_text="Identificador usado nas URLs"
    )

    theme_primary_color = models.CharField(max_length=7, default='#1a365d')
    theme_secondary_color = models.CharField(max_length=7, default='#2d3748')
    theme_accent_color = models.CharField(max_length=7, default='#4299e1')

    logo_url = models.CharField(
        max_length=500,
        null=True,
        blank=True,
        help_text="Referência ao logo"
    )

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'organizations'
        verbose_name = 'Organização'
        verbose_name_plural = 'Organizações'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.slug})"


class MembershipModel(models.Model):
    """
    Associação de um usuário a uma organização.

    A associação determina quais tenants o usuário pode selecionar.
    """

    id = models.BigAutoField(primary_key=True)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='organization_memberships',
    )

    organization = models.ForeignKey(
        OrganizationModel,
        on_delete=models.CASCADE,
        related_name='memberships',
    )

    role = models.CharField(
        max_length=20,
        choices=MembershipRoleChoices.choices,
        default=MembershipRoleChoices.MEMBER,
    )

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'user_organizations'
        verbose_name = 'Associação'
        verbose_name_plural = 'Associações'
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'organization'],
                name='unique_user_organization',
            ),
        ]

    def __str__(self):
        return f"{self.user_id} @ {self.organization_id} ({self.role})"
