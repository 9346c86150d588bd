"""
Logging configuration for the diff service
"""
import sys
from loguru import logger
from datetime import datetime
from sow_diff.core.config import get_settings


def configure_logging():
    """
    Configure logging for the current environment
    """
    settings = get_settings()

    # Remove default logger
    logger.remove()

    if settings.environment == "production":
        # JSON lines for log aggregators
        logger.add(
            sys.stdout,
            level=settings.log_level,
            serialize=True,
            backtrace=False,
            diagnose=False
        )
    else:
        logger.add(
            sys.stdout,
            format=settings.log_format,
            level=settings.log_level,
            colorize=settings.environment == "development",
            backtrace=True,
            diagnose=settings.environment == "development"
        )

    # File logging if specified
    if settings.log_file:
        logger.add(
            settings.log_file,
            format=settings.log_format,
            level=settings.log_level,
            rotation=settings.log_rotation,
            retention=settings.log_retention,
            compression="gz",
            backtrace=True,
            diagnose=False  # Don't include sensitive data in file logs
        )

    logger.info(
        f"Logging configured for {settings.environment} "
        f"(level={settings.log_level}, file={settings.log_file or 'none'})"
    )


class RequestLoggingMiddleware:
    """
    ASGI middleware logging one line per HTTP response, including the
    query string so compared revision ids show up in the access log
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http":
            start_time = datetime.now()

            async def send_wrapper(message):
                if message["type"] == "http.response.start":
                    status_code = message["status"]
                    processing_time = (datetime.now() - start_time).total_seconds()

                    method = scope["method"]
                    path = scope["path"]
                    query = scope.get("query_string", b"").decode("latin-1")
                    target = f"{path}?{query}" if query else path
                    client_ip = scope["client"][0] if scope.get("client") else "unknown"

                    log_level = "ERROR" if status_code >= 500 else "WARNING" if status_code >= 400 else "INFO"
                    logger.bind(
                        method=method,
                        path=path,
                        query=query,
                        status_code=status_code,
                        processing_time=processing_time,
                        client_ip=client_ip
                    ).log(log_level, f"{method} {target} -> {status_code} ({processing_time:.3f}s)")

                await send(message)

            await self.app(scope, receive, send_wrapper)
        else:
            await self.app(scope, receive, send)
