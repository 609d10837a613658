"""
Progress computation service

Derives read-only views from session evaluations: category averages,
phase breakdowns, trend deltas and coverage against the reference taxonomies.
All functions are pure; they never touch storage.
"""
from typing import Dict, List, Optional

from app.database.schemas import (
    AppData,
    CategoryAverages,
    ConditionCoverage,
    DashboardSummary,
    FirstAchieved,
    ObjectiveCoverage,
    OutcomeProgress,
    PhaseSummary,
    SessionEvaluation,
    SkillProgress,
    StudentProfile,
    StudentProgress,
    TimelineEntry,
    TopicCoverage,
    TrendDelta,
)
from app.services.objectives import legacy_indices, versioned_ids
from app.services.reference import (
    ALL_CONDITIONS,
    CLINICAL_OBJECTIVES,
    CLINICAL_OBJECTIVES_V2,
    CLINICAL_SKILLS,
    PHASE_CONFIG,
    PHASES,
    SCORE_KEYS,
    TEACHING_TOPIC_CATEGORIES,
    TOTAL_CONDITIONS,
    TOTAL_OBJECTIVE_EXPECTATIONS,
    expectation_ids_for_outcome,
    phase_for_week,
)

RECENT_EVALUATION_COUNT = 5


def _ratio(numerator: int, denominator: int) -> float:
    if denominator <= 0:
        return 0.0
    return min(numerator / denominator, 1.0)


def score_values(evaluation: SessionEvaluation) -> Dict[str, int]:
    """
    Scores keyed by their persisted (camelCase) name
    """
    return evaluation.scores.model_dump(by_alias=True)


def evaluation_mean(evaluation: SessionEvaluation) -> float:
    """
    Mean of the eight competency scores of one evaluation
    """
    values = score_values(evaluation)
    return sum(values[key] for key in SCORE_KEYS) / len(SCORE_KEYS)


def category_averages(evaluations: List[SessionEvaluation]) -> CategoryAverages:
    """
    Average each score category across a set of evaluations

    Args:
        evaluations: Evaluations to average (may be empty)

    Returns:
        CategoryAverages with unrounded means; all zeros for an empty set
    """
    count = len(evaluations)
    if count == 0:
        return CategoryAverages(scores={key: 0.0 for key in SCORE_KEYS}, overall_rating=0.0, session_count=0)

    totals = {key: 0 for key in SCORE_KEYS}
    for evaluation in evaluations:
        values = score_values(evaluation)
        for key in SCORE_KEYS:
            totals[key] += values[key]

    return CategoryAverages(
        scores={key: totals[key] / count for key in SCORE_KEYS},
        overall_rating=sum(e.overall_rating for e in evaluations) / count,
        session_count=count,
    )


def sort_by_week(evaluations: List[SessionEvaluation]) -> List[SessionEvaluation]:
    """
    Order evaluations by week number (ties keep their original order)
    """
    return sorted(evaluations, key=lambda e: e.week_number)


def group_by_phase(evaluations: List[SessionEvaluation]) -> Dict[str, List[SessionEvaluation]]:
    """
    Partition evaluations into early/middle/final using the week number

    The stored phase field is not trusted; it is always derived again.
    """
    buckets: Dict[str, List[SessionEvaluation]] = {phase: [] for phase in PHASES}
    for evaluation in evaluations:
        buckets[phase_for_week(evaluation.week_number)].append(evaluation)
    return buckets


def phase_breakdown(evaluations: List[SessionEvaluation]) -> List[PhaseSummary]:
    """
    Session count and category averages for each phase, in rotation order
    """
    buckets = group_by_phase(evaluations)
    return [
        PhaseSummary(
            phase=phase,
            label=PHASE_CONFIG[phase]['label'],
            weeks=PHASE_CONFIG[phase]['weeks'],
            session_count=len(buckets[phase]),
            averages=category_averages(buckets[phase]),
        )
        for phase in PHASES
    ]


def trend_delta(evaluations: List[SessionEvaluation]) -> Optional[TrendDelta]:
    """
    Change in mean score from the first to the last session by week order

    Args:
        evaluations: One student's evaluations (any order)

    Returns:
        TrendDelta, or None when fewer than two evaluations exist
    """
    if len(evaluations) < 2:
        return None
    ordered = sort_by_week(evaluations)
    first_mean = evaluation_mean(ordered[0])
    last_mean = evaluation_mean(ordered[-1])
    return TrendDelta(
        first_mean=first_mean,
        last_mean=last_mean,
        delta=last_mean - first_mean,
        session_count=len(ordered),
    )


def condition_coverage(evaluations: List[SessionEvaluation]) -> ConditionCoverage:
    """
    Conditions seen across evaluations compared with the prepopulated taxonomy

    Taxonomy and custom conditions are pooled. Only entries that match a
    taxonomy condition (case-insensitive) count toward the ratio; the
    denominator is always the taxonomy size.
    """
    seen: List[str] = []
    seen_lower = set()
    for evaluation in evaluations:
        for condition in evaluation.conditions_seen + evaluation.custom_conditions:
            condition = condition.strip()
            if condition and condition.lower() not in seen_lower:
                seen.append(condition)
                seen_lower.add(condition.lower())

    taxonomy_lower = {condition.lower() for condition in ALL_CONDITIONS}
    matched = [condition for condition in ALL_CONDITIONS if condition.lower() in seen_lower]
    custom_only = [condition for condition in seen if condition.lower() not in taxonomy_lower]

    return ConditionCoverage(
        seen=seen,
        matched=matched,
        custom_only=custom_only,
        total=TOTAL_CONDITIONS,
        ratio=_ratio(len(matched), TOTAL_CONDITIONS),
    )


def objective_coverage(evaluations: List[SessionEvaluation]) -> ObjectiveCoverage:
    """
    Versioned expectations achieved across evaluations

    Legacy index entries are reported separately and never count toward the
    ratio. Expectation ids that do not exist in the taxonomy are ignored.
    """
    achieved_set = set()
    legacy_set = set()
    for evaluation in evaluations:
        achieved_set.update(versioned_ids(evaluation.objectives_achieved))
        legacy_set.update(legacy_indices(evaluation.objectives_achieved))

    outcomes = []
    achieved: List[str] = []
    for objective in CLINICAL_OBJECTIVES_V2:
        ids = expectation_ids_for_outcome(objective)
        outcome_achieved = [expectation for expectation in ids if expectation in achieved_set]
        achieved.extend(outcome_achieved)
        outcomes.append(OutcomeProgress(
            outcome_id=objective['id'],
            outcome=objective['outcome'],
            achieved=outcome_achieved,
            total=len(ids),
            ratio=_ratio(len(outcome_achieved), len(ids)),
        ))

    return ObjectiveCoverage(
        achieved=achieved,
        total=TOTAL_OBJECTIVE_EXPECTATIONS,
        ratio=_ratio(len(achieved), TOTAL_OBJECTIVE_EXPECTATIONS),
        outcomes=outcomes,
        legacy_indices=sorted(i for i in legacy_set if i < len(CLINICAL_OBJECTIVES)),
    )


def first_achieved(evaluations: List[SessionEvaluation]) -> Dict[str, FirstAchieved]:
    """
    Earliest evaluation (by date) that achieved each expectation id

    Later sessions achieving the same expectation never replace the first one.
    Equal dates keep the evaluation seen first.
    """
    result: Dict[str, FirstAchieved] = {}
    for evaluation in evaluations:
        for expectation in versioned_ids(evaluation.objectives_achieved):
            current = result.get(expectation)
            if current is None or evaluation.date < current.date:
                result[expectation] = FirstAchieved(
                    evaluation_id=evaluation.id,
                    date=evaluation.date,
                    week_number=evaluation.week_number,
                )
    return result


def topic_coverage(evaluations: List[SessionEvaluation]) -> List[TopicCoverage]:
    """
    Distinct topics taught per teaching category and how many sessions touched it

    Taxonomy categories come first in their fixed order, followed by any
    other categories found in the evaluations.
    """
    taxonomy = {entry['category']: entry['topics'] for entry in TEACHING_TOPIC_CATEGORIES}
    categories = list(taxonomy)
    topics: Dict[str, List[str]] = {category: [] for category in categories}
    sessions: Dict[str, int] = {category: 0 for category in categories}

    for evaluation in evaluations:
        touched = set()
        for entry in evaluation.teaching_topics:
            if entry.category not in topics:
                categories.append(entry.category)
                topics[entry.category] = []
                sessions[entry.category] = 0
            for topic in entry.topics:
                if topic not in topics[entry.category]:
                    topics[entry.category].append(topic)
            if entry.topics:
                touched.add(entry.category)
        for category in touched:
            sessions[category] += 1

    coverage = []
    for category in categories:
        known = taxonomy.get(category, [])
        covered = [topic for topic in topics[category] if topic in known]
        coverage.append(TopicCoverage(
            category=category,
            topics=topics[category],
            session_count=sessions[category],
            taxonomy_total=len(known),
            ratio=_ratio(len(covered), len(known)),
        ))
    return coverage


def clinical_skill_progress(student: StudentProfile) -> List[SkillProgress]:
    """
    Count demonstrated behaviours per clinical skill for a student
    """
    ratings = {score.skill_id: score.rating for score in student.clinical_skill_scores}

    progress = []
    for skill in CLINICAL_SKILLS:
        minimal = skill['minimal_expectations']
        exemplary = skill['exemplary_behaviors']
        progress.append(SkillProgress(
            skill_id=skill['id'],
            category=skill['category'],
            minimal_demonstrated=sum(1 for b in minimal if ratings.get(b['id']) == 'demonstrating'),
            minimal_total=len(minimal),
            exemplary_demonstrated=sum(1 for b in exemplary if ratings.get(b['id']) == 'demonstrating'),
            exemplary_total=len(exemplary),
        ))
    return progress


def filter_evaluations(
    evaluations: List[SessionEvaluation],
    student_id: Optional[str] = None,
    phase: Optional[str] = None,
    sort_by: str = "date",
) -> List[SessionEvaluation]:
    """
    Filter and order evaluations for list views

    Args:
        evaluations: All evaluations
        student_id: Keep only this student's evaluations (None for all)
        phase: Keep only this phase, derived from week number (None for all)
        sort_by: 'date', 'week' or 'rating' (all newest/highest first)

    Returns:
        New filtered and sorted list
    """
    result = list(evaluations)
    if student_id:
        result = [e for e in result if e.student_id == student_id]
    if phase:
        result = [e for e in result if phase_for_week(e.week_number) == phase]

    if sort_by == "week":
        result.sort(key=lambda e: e.week_number, reverse=True)
    elif sort_by == "rating":
        result.sort(key=lambda e: e.overall_rating, reverse=True)
    else:
        result.sort(key=lambda e: e.date, reverse=True)
    return result


def dashboard_summary(data: AppData) -> DashboardSummary:
    """
    Headline statistics across all students and evaluations
    """
    evaluations = data.evaluations
    count = len(evaluations)
    buckets = group_by_phase(evaluations)

    return DashboardSummary(
        student_count=len(data.students),
        evaluation_count=count,
        average_overall=sum(e.overall_rating for e in evaluations) / count if count > 0 else 0.0,
        weeks_logged=len({e.week_number for e in evaluations}),
        phase_counts={phase: len(buckets[phase]) for phase in PHASES},
        category_averages=category_averages(evaluations),
        recent_evaluations=filter_evaluations(evaluations, sort_by="date")[:RECENT_EVALUATION_COUNT],
        conditions=condition_coverage(evaluations),
        objectives=objective_coverage(evaluations),
        topics=[t for t in topic_coverage(evaluations) if t.session_count > 0],
    )


def student_progress(data: AppData, student_id: str) -> Optional[StudentProgress]:
    """
    Full progress view for one student

    Args:
        data: Current document
        student_id: Student to report on

    Returns:
        StudentProgress, or None if the student does not exist
    """
    student = next((s for s in data.students if s.id == student_id), None)
    if student is None:
        return None

    evaluations = sort_by_week([e for e in data.evaluations if e.student_id == student_id])
    timeline = [
        TimelineEntry(
            evaluation_id=e.id,
            week_number=e.week_number,
            phase=phase_for_week(e.week_number),
            date=e.date,
            session_type=e.session_type,
            mean_score=evaluation_mean(e),
            overall_rating=e.overall_rating,
        )
        for e in evaluations
    ]

    return StudentProgress(
        student=student,
        session_count=len(evaluations),
        phases=phase_breakdown(evaluations),
        trend=trend_delta(evaluations),
        timeline=timeline,
        conditions=condition_coverage(evaluations),
        objectives=objective_coverage(evaluations),
        first_achieved=first_achieved(evaluations),
        topics=topic_coverage(evaluations),
        clinical_skills=clinical_skill_progress(student),
    )
