"""
Progress service module
"""

from app.services.progress.computation import (
    phase_for_week,
    evaluation_mean,
    category_averages,
    sort_by_week,
    group_by_phase,
    phase_breakdown,
    trend_delta,
    condition_coverage,
    objective_coverage,
    first_achieved,
    topic_coverage,
    clinical_skill_progress,
    filter_evaluations,
    dashboard_summary,
    student_progress,
)

__all__ = [
    "phase_for_week",
    "evaluation_mean",
    "category_averages",
    "sort_by_week",
    "group_by_phase",
    "phase_breakdown",
    "trend_delta",
    "condition_coverage",
    "objective_coverage",
    "first_achieved",
    "topic_coverage",
    "clinical_skill_progress",
    "filter_evaluations",
    "dashboard_summary",
    "student_progress",
]
