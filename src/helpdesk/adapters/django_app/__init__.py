"""
Adapter Django: persistência (ORM), API JSON, admin e handlers Celery.
"""
