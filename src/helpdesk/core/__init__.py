"""
Core Domain Layer - O Hexágono.

Lógica de negócio pura do help-desk multi-tenant, sem dependências de
frameworks:
- organizations: tenants, membros e contexto de sessão
- tickets: entidade, ciclo de vida, busca, dashboard, notificações e anexos
"""
