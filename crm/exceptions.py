# crm/exceptions.py
"""
Error taxonomy shared by every endpoint.

Each error knows the HTTP status it is surfaced as; the request boundary
(``crm.http.json_endpoint``) turns them into JSON responses.
"""


class CRMError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None, **extra):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def as_dict(self):
        data = {"error": self.message}
        data.update(self.extra)
        return data


class AuthenticationError(CRMError):
    status_code = 401
    default_message = "Unauthorized"


class AuthorizationError(CRMError):
    status_code = 403
    default_message = "Access denied"


class ValidationError(CRMError):
    status_code = 400
    default_message = "Invalid request"

    def __init__(self, message=None, fields=(), **extra):
        self.fields = list(fields)
        if message is None and self.fields:
            message = "Invalid or missing field(s): " + ", ".join(self.fields)
        if self.fields:
            extra.setdefault("fields", self.fields)
        super().__init__(message, **extra)


class NotFoundError(CRMError):
    status_code = 404
    default_message = "Not found"


class PersistenceError(CRMError):
    status_code = 500
    default_message = "Database error"
