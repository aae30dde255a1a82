"""
WSGI entry point, e.g. `gunicorn pemo_qoyod.web.wsgi`.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "pemo_qoyod.web.settings")

application = get_wsgi_application()
