"""Report compiler for ReportQL: request in, SQL clauses out."""

from .report_compiler import (
    CompiledReport,
    DroppedArtifact,
    DroppedKind,
    ReportCompileError,
    ReportCompiler,
    ReportQueryParts,
    ReportValidationError,
    compile_report,
    preview_report,
)

__all__ = [
    "CompiledReport",
    "DroppedArtifact",
    "DroppedKind",
    "ReportCompileError",
    "ReportCompiler",
    "ReportQueryParts",
    "ReportValidationError",
    "compile_report",
    "preview_report",
]
