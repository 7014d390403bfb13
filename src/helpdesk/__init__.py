"""HelpDesk - central de atendimento multi-tenant."""

__version__ = "1.0.0"
