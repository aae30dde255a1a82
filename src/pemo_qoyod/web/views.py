"""
Views for the sync trigger endpoint.
"""

import logging
from pathlib import Path

import yaml
from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from ..config import load_config
from ..services.sync_job import TRIGGER_METHOD, MethodNotAllowedError, SyncJob

logger = logging.getLogger(__name__)


def _config_path() -> Path | None:
    path = getattr(settings, "SYNC_CONFIG_PATH", None)
    return Path(path) if path else None


def _method_not_allowed(error: MethodNotAllowedError) -> JsonResponse:
    logger.warning(f"Rejected sync trigger with method {error.method}")
    response = JsonResponse({"error": str(error)}, status=405)
    response["Allow"] = TRIGGER_METHOD
    return response


@csrf_exempt
def sync_invoices(request: HttpRequest) -> JsonResponse:
    """Run one export pass. Only GET triggers it; request body and query are ignored."""
    try:
        SyncJob.check_method(request.method)
    except MethodNotAllowedError as e:
        return _method_not_allowed(e)

    # Configuration is re-read on every invocation
    try:
        config = load_config(_config_path())
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.exception("Failed to load sync configuration")
        return JsonResponse({"error": f"Failed to load config: {e}"}, status=500)

    result = SyncJob(config).run(request.method)
    return JsonResponse(result.body, status=result.status_code)
