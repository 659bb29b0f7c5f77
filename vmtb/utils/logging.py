"""
Structured logging configuration for the VMTB core.
Provides request tracking, collaborator latency metrics, and audit logging.
"""

import asyncio
import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from vmtb.utils.config import settings

# Request context for tracking
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar("user_id", default=None)
session_id_var: ContextVar[Optional[str]] = ContextVar("session_id", default=None)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": _utc_timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if request_id := request_id_var.get():
            log_entry["request_id"] = request_id
        if user_id := user_id_var.get():
            log_entry["user_id"] = user_id
        if session_id := session_id_var.get():
            log_entry["session_id"] = session_id

        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class LatencyLogger:
    """Logger for collaborator call latency."""

    def __init__(self, name: str = "latency"):
        self.logger = logging.getLogger(name)

    def log_latency(
        self,
        operation: str,
        duration_ms: float,
        success: bool = True,
        backend: Optional[str] = None,
        threshold_exceeded: bool = False,
        **kwargs,
    ) -> None:
        """Log operation latency with context."""
        extra_fields = {
            "type": "latency",
            "operation": operation,
            "duration_ms": duration_ms,
            "success": success,
            "backend": backend,
            "threshold_exceeded": threshold_exceeded,
            **kwargs,
        }

        if not success:
            level = logging.ERROR
        elif threshold_exceeded:
            level = logging.WARNING
        else:
            level = logging.INFO

        message = f"{operation} completed in {duration_ms:.2f}ms"
        if threshold_exceeded:
            message += " [THRESHOLD EXCEEDED]"
        if not success:
            message += " [FAILED]"

        self.logger.log(level, message, extra={"extra_fields": extra_fields})


class AuditLogger:
    """Logger for the audit trail of case data access and workflow changes."""

    def __init__(self, name: str = "audit"):
        self.logger = logging.getLogger(name)

    def log_data_access(
        self,
        resource_type: str,
        resource_id: str,
        user_id: Optional[str],
        operation: str,
        success: bool,
        **kwargs,
    ) -> None:
        """Log data access for audit trail."""
        extra_fields = {
            "type": "data_access",
            "resource_type": resource_type,
            "resource_id": resource_id,
            "user_id": user_id,
            "operation": operation,
            "success": success,
            "timestamp": _utc_timestamp(),
            **kwargs,
        }

        self.logger.info(
            f"Data access: {operation} {resource_type}",
            extra={"extra_fields": extra_fields},
        )

    def log_workflow_transition(
        self,
        session_id: str,
        owner_id: Optional[str],
        from_step: str,
        to_step: str,
        accepted: bool,
        **kwargs,
    ) -> None:
        """Log a case intake step transition attempt."""
        extra_fields = {
            "type": "workflow_transition",
            "session_id": session_id,
            "user_id": owner_id,
            "from_step": from_step,
            "to_step": to_step,
            "accepted": accepted,
            "timestamp": _utc_timestamp(),
            **kwargs,
        }

        level = logging.INFO if accepted else logging.WARNING
        self.logger.log(
            level,
            f"Workflow transition {from_step} -> {to_step}"
            + ("" if accepted else " [BLOCKED]"),
            extra={"extra_fields": extra_fields},
        )


def setup_logging() -> None:
    """Configure application logging."""
    if settings.enable_structured_logging:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Audit trail can also be mirrored to a file
    if settings.audit_log_file:
        file_handler = logging.FileHandler(settings.audit_log_file)
        file_handler.setFormatter(formatter)
        audit_logger = logging.getLogger("audit")
        audit_logger.addHandler(file_handler)
        audit_logger.setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get logger instance with proper configuration."""
    return logging.getLogger(name)


def get_latency_logger() -> LatencyLogger:
    """Get latency logger instance."""
    return LatencyLogger()


def get_audit_logger() -> AuditLogger:
    """Get audit logger instance."""
    return AuditLogger()


class RequestContext:
    """Context manager for request tracking."""

    def __init__(
        self,
        request_id: Optional[str] = None,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ):
        self.request_id = request_id or str(uuid.uuid4())
        self.user_id = user_id
        self.session_id = session_id
        self._tokens = []

    def __enter__(self):
        self._tokens.append(request_id_var.set(self.request_id))
        if self.user_id:
            self._tokens.append(user_id_var.set(self.user_id))
        if self.session_id:
            self._tokens.append(session_id_var.set(self.session_id))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        for token in reversed(self._tokens):
            token.var.reset(token)


def _check_threshold(operation: str, duration_ms: float) -> bool:
    """Check if operation duration exceeds configured thresholds."""
    if operation.startswith("registry"):
        return duration_ms > settings.registry_latency_threshold_ms
    if operation.startswith("store"):
        return duration_ms > settings.store_latency_threshold_ms
    return False


def monitor_latency(operation: str, backend: Optional[str] = None):
    """Decorator to monitor collaborator call latency with threshold checking."""

    def decorator(func):
        async def async_wrapper(*args, **kwargs):
            start_time = time.time()
            success = True
            try:
                return await func(*args, **kwargs)
            except Exception:
                success = False
                raise
            finally:
                duration_ms = (time.time() - start_time) * 1000
                get_latency_logger().log_latency(
                    operation=operation,
                    duration_ms=duration_ms,
                    success=success,
                    backend=backend,
                    threshold_exceeded=_check_threshold(operation, duration_ms),
                )

        def sync_wrapper(*args, **kwargs):
            start_time = time.time()
            success = True
            try:
                return func(*args, **kwargs)
            except Exception:
                success = False
                raise
            finally:
                duration_ms = (time.time() - start_time) * 1000
                get_latency_logger().log_latency(
                    operation=operation,
                    duration_ms=duration_ms,
                    success=success,
                    backend=backend,
                    threshold_exceeded=_check_threshold(operation, duration_ms),
                )

        if asyncio.iscoroutinefunction(func):
            async_wrapper.__name__ = func.__name__
            async_wrapper.__doc__ = func.__doc__
            return async_wrapper
        sync_wrapper.__name__ = func.__name__
        sync_wrapper.__doc__ = func.__doc__
        return sync_wrapper

    return decorator
