# commons/middleware.py

import logging
import time
import uuid

from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger("pdv.request")


class RequestLogMiddleware(MiddlewareMixin):
    """
    Registra uma linha por requisição (JSON via python-json-logger) e propaga
    o X-Request-ID para as views, que o repassam aos services.
    """

    def process_request(self, request):
        request.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request._start_time = time.monotonic()

    def process_response(self, request, response):
        inicio = getattr(request, "_start_time", None)
        latency = int((time.monotonic() - inicio) * 1000) if inicio is not None else None

        user = getattr(request, "user", None)
        logger.info(
            "http_request",
            extra={
                "event": "http_request",
                "request_id": getattr(request, "request_id", "-"),
                "path": request.path,
                "method": request.method,
                "status": response.status_code,
                "latency_ms": latency,
                "operador_id": getattr(user, "pk", None),
            },
        )
        response["X-Request-ID"] = getattr(request, "request_id", "-")
        return response
