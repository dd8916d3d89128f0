"""Logging configuration utilities."""

import logging
import sys
from typing import Optional

import structlog
from structlog.contextvars import bind_contextvars


SENSITIVE_KEYS = {
    "password",
    "secret",
    "token",
    "api_key",
    "apikey",
    "authorization",
    "auth",
    "access_key",
    "secret_key",
}

# `--var=` arguments may carry credentials; their values are masked in logs
_VAR_FLAG = "--var="


def _redact_sensitive(_, __, event_dict: dict) -> dict:
    """Redact sensitive fields in the structured log."""
    for key in list(event_dict.keys()):
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = "[REDACTED]"
    args = event_dict.get("args")
    if isinstance(args, list):
        event_dict["args"] = [redact_var_arg(a) for a in args]
    return event_dict


def redact_var_arg(arg: str) -> str:
    """Mask the value of a `--var=KEY=VALUE` argument."""
    if not isinstance(arg, str) or not arg.startswith(_VAR_FLAG):
        return arg
    name, sep, _ = arg[len(_VAR_FLAG):].partition("=")
    if not sep:
        return arg
    return f"{_VAR_FLAG}{name}=[REDACTED]"


def setup_logging(log_level: str = "INFO", log_format: str = "console") -> None:
    """Configure structured logging."""

    # Logs go to stderr; stdout carries tool output for the user
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        _redact_sensitive,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, log_level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # Not cached, so reconfiguring applies to module-level loggers too
        cache_logger_on_first_use=False,
    )


def bind_deployment_context(deployment_name: Optional[str] = None, pack: Optional[str] = None) -> None:
    """Bind correlation fields for platform logs using contextvars."""
    if deployment_name:
        bind_contextvars(deployment=deployment_name)
    if pack:
        bind_contextvars(pack=pack)
