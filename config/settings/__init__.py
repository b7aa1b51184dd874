# config/settings/__init__.py
# DJANGO_ENV=prod|production -> prod.py, anything else -> local.py
import os

DJANGO_ENV = os.getenv("DJANGO_ENV", "local").strip().lower()

if DJANGO_ENV in ("prod", "production"):
    from .prod import *  # noqa
else:
    from .local import *  # noqa
