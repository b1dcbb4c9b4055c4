"""
ASGI config for the PottaAPI project.

It exposes the ASGI callable as a module-level variable named ``application``.
The server refuses to start when the POS database file cannot be found.
"""
import os

from django.core.asgi import get_asgi_application

from core.database import require_database

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'potta.settings')

require_database()

application = get_asgi_application()
