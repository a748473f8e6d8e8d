"""Logging setup: every record carries the ambient tenant."""

import logging
import sys

from app.core.tenant_context import get_tenant

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [tenant=%(tenant_slug)s:%(tenant_id)s] %(message)s"


class TenantLogFilter(logging.Filter):
    """Copy the ambient tenant onto each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        info = get_tenant()
        record.tenant_id = info.tenant_id if info else "-"
        record.tenant_slug = info.tenant_slug if info else "-"
        return True


def setup_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(TenantLogFilter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)
