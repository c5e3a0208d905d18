"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- identifier
- session_uuid
- folder
- duration_ms

Usage:
    from poi_gateway.utils.logging import configure_logging, log_upload_initiated

    configure_logging('poi-gateway', 'INFO')
    log_upload_initiated(logger, session_uuid='s-1', file_name='ADDR1.jpg', folder='pending')
"""
import logging
import sys
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger


class StructuredLogger:
    """Structured JSON logger with mandatory fields."""

    _service_name = None
    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO"):
        """
        Configure structured JSON logging for the application.

        Args:
            service_name: Service identifier (e.g. poi-gateway)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        if cls._configured:
            return

        cls._service_name = service_name

        root_logger = logging.getLogger()
        root_logger.handlers = []

        formatter = jsonlogger.JsonFormatter(
            '%(timestamp)s %(levelname)s %(name)s %(message)s',
            timestamp=True,
            json_ensure_ascii=False
        )

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Add service name to all log records via filter
        class ServiceFilter(logging.Filter):
            def filter(self, record):
                record.service = cls._service_name
                return True

        handler.addFilter(ServiceFilter())
        cls._configured = True


def _build_log_extra(
    event: str,
    identifier: Optional[str] = None,
    session_uuid: Optional[str] = None,
    folder: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Build extra fields for structured logging.

    Args:
        event: Event name (mandatory)
        identifier: Optional object identifier (e.g. account address)
        session_uuid: Optional upload session UUID
        folder: Optional folder name
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields

    Returns:
        Dictionary of extra fields
    """
    extra = {
        "event": event,
        **kwargs
    }

    if identifier:
        extra["identifier"] = identifier
    if session_uuid:
        extra["session_uuid"] = session_uuid
    if folder:
        extra["folder"] = folder
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


# Upload events

def log_upload_initiated(
    logger: logging.Logger,
    session_uuid: str,
    file_name: str,
    folder: str,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """
    Log upload session creation.

    Args:
        logger: Logger instance
        session_uuid: Backend session UUID (required)
        file_name: Target file name (required)
        folder: Target folder (required)
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="upload_initiated",
        session_uuid=session_uuid,
        folder=folder,
        duration_ms=duration_ms,
        file_name=file_name,
        **kwargs
    )
    logger.info(f"Upload initiated: {folder}/{file_name}", extra=extra)


def log_upload_completed(
    logger: logging.Logger,
    session_uuid: str,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """Log upload session completion."""
    extra = _build_log_extra(
        event="upload_completed",
        session_uuid=session_uuid,
        duration_ms=duration_ms,
        **kwargs
    )
    logger.info(f"Upload completed: {session_uuid}", extra=extra)


# Move / sync events

def log_object_moved(
    logger: logging.Logger,
    identifier: str,
    from_path: str,
    to_path: str,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """
    Log a successful copy-then-delete relocation.

    Args:
        logger: Logger instance
        identifier: Object identifier (required)
        from_path: Source path, e.g. pending/ADDR1.jpg (required)
        to_path: Destination path (required)
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="object_moved",
        identifier=identifier,
        duration_ms=duration_ms,
        from_path=from_path,
        to_path=to_path,
        **kwargs
    )
    logger.info(f"Object moved: {from_path} -> {to_path}", extra=extra)


def log_object_move_failed(
    logger: logging.Logger,
    identifier: str,
    error: str,
    step: Optional[str] = None,
    **kwargs
):
    """
    Log a failed relocation.

    Args:
        logger: Logger instance
        identifier: Object identifier (required)
        error: Error message (required)
        step: Recipe step that failed (fetch, initiate, transfer, complete, delete)
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="object_move_failed",
        identifier=identifier,
        error=str(error),
        **kwargs
    )
    if step:
        extra["step"] = step

    # A failed delete leaves a duplicate behind, which needs an operator
    level = logging.ERROR if step == "delete" else logging.WARNING
    logger.log(level, f"Object move failed: {identifier} - {error}", extra=extra)


def log_sync_completed(
    logger: logging.Logger,
    requested: int,
    moved: int,
    skipped: int,
    errors: int,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """Log the outcome of a batch sync."""
    extra = _build_log_extra(
        event="sync_completed",
        duration_ms=duration_ms,
        requested=requested,
        moved=moved,
        skipped=skipped,
        errors=errors,
        **kwargs
    )
    logger.info(
        f"Sync completed: {moved} moved, {skipped} skipped, {errors} errors",
        extra=extra
    )


# Backend / security events

def log_backend_failure(
    logger: logging.Logger,
    operation: str,
    error: str,
    status_code: Optional[int] = None,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """
    Log a storage backend failure.

    Args:
        logger: Logger instance
        operation: Backend operation (initiate, complete, list, delete, fetch, put)
        error: Error message (required)
        status_code: HTTP status returned by the backend, if any
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="backend_failure",
        duration_ms=duration_ms,
        operation=operation,
        error=str(error),
        **kwargs
    )
    if status_code is not None:
        extra["status_code"] = status_code

    logger.error(f"Backend failure: {operation} - {error}", extra=extra)


def log_origin_rejected(
    logger: logging.Logger,
    origin: Optional[str],
    path: str,
    method: str,
    **kwargs
):
    """Log a request refused by the origin guard."""
    extra = _build_log_extra(
        event="origin_rejected",
        origin=origin or "",
        path=path,
        method=method,
        **kwargs
    )
    logger.warning(f"Rejected origin: {origin!r} on {method} {path}", extra=extra)


def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)
