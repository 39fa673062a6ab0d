# backend/settings/__init__.py
"""
Settings package. Nothing is loaded here; select a module explicitly:
- backend.settings.dev   (local development, default for manage.py)
- backend.settings.test  (manage.py test / pytest)
- backend.settings.prod  (production)
"""
