"""Settings for the pytest run.

Production settings with an in-process cache, eager Celery and no rate
limiting; ``tests/integration/orders/test_throttling.py`` switches the
order throttle back on for itself.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-only-insecure-secret-key")

from config.settings import *  # noqa: E402,F401,F403
from config.settings import REST_FRAMEWORK  # noqa: E402

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

CELERY_TASK_ALWAYS_EAGER = True

REST_FRAMEWORK = {**REST_FRAMEWORK, "DEFAULT_THROTTLE_CLASSES": []}

