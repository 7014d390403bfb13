#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Cria banco de dados SQLite
3. Executa migrations
4. Cria organização, usuário e tickets de exemplo (opcional)

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
"""

import os
import sys
import argparse
import uuid

# Adicionar src ao path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))


SAMPLE_TICKETS = [
    {
        'client_file_no': 'F100',
        'mobile_no': '9998887776',
        'name_of_client': 'Jane Doe',
        'issue_type': 'Payment',
        'description': 'late payment',
    },
    {
        'client_file_no': 'F101',
        'mobile_no': '9876543210',
        'name_of_client': 'John Smith',
        'issue_type': 'Refund Update',
        'description': 'Cliente aguardando restituição desde o mês passado.',
    },
    {
        'client_file_no': 'F102',
        'mobile_no': '9123456780',
        'name_of_client': 'Maria Souza',
        'issue_type': 'GST Filing',
        'description': 'Declaração mensal pendente de envio.',
    },
]


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'helpdesk.config.settings')

    # Forçar SQLite para desenvolvimento rápido
    os.environ.pop('DATABASE_URL', None)
    os.environ.pop('DATABASE_HOST', None)

    import django
    django.setup()


def run_migrations():
    """Executa migrations."""
    from django.core.management import call_command

    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


def create_sample_data():
    """Cria organização demo, superusuário admin/admin e tickets."""
    from django.contrib.auth import get_user_model

    from helpdesk.adapters.django_app.organizations.models import (
        MembershipModel,
        MembershipRoleChoices,
        OrganizationModel,
    )
    from helpdesk.config.container import get_container
    from helpdesk.core.tickets.dtos import CriarTicketInputDTO

    User = get_user_model()
    admin, criado = User.objects.get_or_create(
        username='admin',
        defaults={'email': 'admin@helpdesk.local', 'is_staff': True, 'is_superuser': True},
    )
    if criado:
        admin.set_password('admin')
        admin.save()
        print("   ✓ Superusuário admin/admin criado")

    org, _ = OrganizationModel.objects.get_or_create(
        slug='demo',
        defaults={'id': str(uuid.uuid4()), 'name': 'Demo'},
    )
    MembershipModel.objects.get_or_create(
        user=admin,
        organization=org,
        defaults={'role': MembershipRoleChoices.ADMIN},
    )

    print("📝 Criando tickets de exemplo...")

    criar_service = get_container().criar_ticket_service()
    for indice, dados in enumerate(SAMPLE_TICKETS):
        output = criar_service.execute(
            CriarTicketInputDTO(
                organization_id=org.id,
                opened_by=admin.email,
                # Primeiro ticket já sai atribuído para gerar notificação
                assigned_to=str(admin.pk) if indice == 0 else None,
                **dados,
            )
        )
        print(f"   ✓ {output.ticket_no} - {output.name_of_client}")

    print(f"✅ {len(SAMPLE_TICKETS)} tickets criados na organização '{org.slug}'!")


def check_connection():
    """Verifica conexão com o banco."""
    from django.db import DatabaseError, connection

    print("🔍 Verificando conexão com o banco...")

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        print("✅ Conexão OK!")
        return True
    except DatabaseError as e:
        print(f"❌ Erro de conexão: {e}")
        return False


def show_info():
    """Mostra informações do setup."""
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print(f"  Event Publisher: {settings.EVENT_PUBLISHER_MODE}")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. DJANGO_SETTINGS_MODULE=helpdesk.config.settings django-admin runserver")
    print("   2. Acesse: http://localhost:8000/admin/")
    print("   3. Acesse: http://localhost:8000/api/organizacoes/")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Criar dados de exemplo'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🔧 Helpdesk - Quick Setup")
    print("=" * 60 + "\n")

    # Configurar Django
    setup_django()

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\n⚠️  Não foi possível abrir o banco SQLite local.")
        return

    run_migrations()

    if args.with_sample_data:
        create_sample_data()

    show_info()


if __name__ == '__main__':
    main()
