"""Diagram specifications: model, response recovery and source clean-up."""

from diagrammer.spec.models import (
    DiagramSpecification,
    OutputKind,
    RecoveryError,
    RecoveryErrorKind,
    detect_output_kind,
)
from diagrammer.spec.recovery import recover
from diagrammer.spec.sanitizer import bind_output_path, sanitize

__all__ = [
    "DiagramSpecification",
    "OutputKind",
    "RecoveryError",
    "RecoveryErrorKind",
    "bind_output_path",
    "detect_output_kind",
    "recover",
    "sanitize",
]
