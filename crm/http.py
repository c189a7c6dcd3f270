# crm/http.py
"""
JSON request boundary shared by the API views.

``json_endpoint`` resolves the caller, hands the view an ``Identity`` and
converts every ``CRMError`` (and unexpected database failures) into a JSON
error response.  Nothing past the boundary returns partial results.
"""
import logging
from functools import wraps

from django.db import DatabaseError
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt

from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    CRMError,
    PersistenceError,
)
from .identity import resolve_identity

logger = logging.getLogger(__name__)


def json_endpoint(*methods, action="process request"):
    allowed = {m.upper() for m in methods}

    def decorator(view):
        @csrf_exempt
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            if allowed and request.method not in allowed:
                response = JsonResponse({"error": "Method not allowed"}, status=405)
                response["Allow"] = ", ".join(sorted(allowed))
                return response

            try:
                identity = resolve_identity(request)
                identity.require_admin()
                return view(request, identity, *args, **kwargs)
            except CRMError as exc:
                if isinstance(exc, (AuthenticationError, AuthorizationError)):
                    logger.warning("%s %s denied: %s", request.method, request.path, exc.message)
                return JsonResponse(exc.as_dict(), status=exc.status_code)
            except DatabaseError:
                logger.exception("Error while trying to %s (%s %s)", action, request.method, request.path)
                exc = PersistenceError(f"Failed to {action}")
                return JsonResponse(exc.as_dict(), status=exc.status_code)

        return wrapper

    return decorator


