# config/settings/prod.py
import os

from .base import *  # noqa

DEBUG = False
ALLOWED_HOSTS = [h for h in os.getenv("DJANGO_ALLOWED_HOSTS", "").split(",") if h]

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
