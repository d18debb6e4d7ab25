"""Notenrechner-Engine: Klassifikation, Eindeutigkeit, Aggregation, Anwesenheit."""

from grading.classifier import ClassificationFlags, classify, is_scoring_ct, scoring_bucket
from grading.uniqueness import UniquenessViolation, check_unique, ensure_unique
from grading.aggregator import GradeAggregator, GradeSummary, ComponentScore, compute_summary
from grading.attendance import attendance_marks, attendance_percentage
from grading.exceptions import (
    GradingError,
    UnsupportedCourseTypeError,
    DuplicateAssessmentError,
    InvalidAssessmentError,
    AssessmentNotFoundError,
)

__all__ = [
    "ClassificationFlags",
    "classify",
    "is_scoring_ct",
    "scoring_bucket",
    "UniquenessViolation",
    "check_unique",
    "ensure_unique",
    "GradeAggregator",
    "GradeSummary",
    "ComponentScore",
    "compute_summary",
    "attendance_marks",
    "attendance_percentage",
    "GradingError",
    "UnsupportedCourseTypeError",
    "DuplicateAssessmentError",
    "InvalidAssessmentError",
    "AssessmentNotFoundError",
]
