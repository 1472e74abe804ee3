from shared.middleware.request_id import request_id_middleware
from shared.middleware.error_handler import api_error_handler, error_envelope_middleware

__all__ = ["request_id_middleware", "error_envelope_middleware", "api_error_handler"]
