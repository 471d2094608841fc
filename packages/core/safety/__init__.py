"""Request safety checks for ReportQL."""

from .validator import ReportCompileError, ReportValidationError, ReportValidator

__all__ = ["ReportCompileError", "ReportValidationError", "ReportValidator"]
