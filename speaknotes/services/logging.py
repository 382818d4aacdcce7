"""
Structured logging configuration
"""
import functools
import logging
import sys
import time

import structlog


def configure_logging(level: str = "INFO"):
    """Configure structlog on top of stdlib logging, rendering JSON lines to stdout"""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    logging.getLogger().setLevel(log_level)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)


def get_logger(name: str = None):
    return structlog.get_logger(name)


def log_performance(func_name: str):
    """Decorator to log how long a function took and whether it raised"""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger("performance")
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    "function_failed",
                    function=func_name,
                    duration_seconds=time.perf_counter() - start,
                    error=str(e),
                    status="error",
                )
                raise
            logger.info(
                "function_completed",
                function=func_name,
                duration_seconds=time.perf_counter() - start,
                status="success",
            )
            return result
        return wrapper
    return decorator


def log_api_request(request, response=None, response_time=None):
    """Log an API request on entry, or its outcome when a response is given"""
    logger = get_logger("api")

    log_data = {
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    if response is None:
        logger.info("api_request_started", **log_data)
        return

    log_data.update({
        "status_code": response.status_code,
        "response_time": response_time,
    })
    if response.status_code >= 500:
        logger.error("api_request_completed", **log_data)
    else:
        logger.info("api_request_completed", **log_data)
