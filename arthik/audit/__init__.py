"""Audit logging package."""

from arthik.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
