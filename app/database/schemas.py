"""
Data models

- One persisted document (AppData) holds the preceptor, students and evaluations
- Stored and exported with camelCase keys; Python attributes are snake_case
- Pydantic provides automatic validation of score ranges and week numbers
- Optional collections default to empty lists so older documents still load
- Derived view models (averages, coverage, trends) live at the bottom
"""
from typing import Optional, Dict, List, Literal, Union
from datetime import datetime
from pydantic import BaseModel, Field, field_validator, ConfigDict
from pydantic.alias_generators import to_camel

from app.services.utils import utc_now


Phase = Literal["early", "middle", "final"]
SkillRating = Literal["not-yet", "demonstrating"]


class CamelModel(BaseModel):
    """
    Base model for the persisted document (camelCase on the wire)
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class PreceptorProfile(CamelModel):
    """
    Preceptor profile (exactly one per document, replaced wholesale)
    """
    name: str        = Field("", description="Preceptor full name")
    title: str       = Field("", description="Professional title (e.g., 'MD', 'Attending Physician')")
    institution: str = Field("", description="Hospital or clinic")
    specialty: str   = Field("", description="Clinical specialty")
    email: str       = Field("", description="Contact email")


class ClinicalSkillScore(CamelModel):
    """
    Rating of one clinical skill behaviour for a student
    """
    skill_id: str       = Field(..., description="Behaviour identifier from CLINICAL_SKILLS (e.g., 'prof-min-a')")
    rating: SkillRating = Field(..., description="'not-yet' or 'demonstrating'")
    date: str           = Field("", description="Date the rating last changed")


class StudentProfile(CamelModel):
    """
    Trainee being evaluated during the rotation
    """
    id: Optional[str]     = Field(None, description="Student unique identifier (auto-generated)")
    name: str             = Field(..., description="Student full name")
    email: str            = Field("", description="Email address")
    program: str          = Field("", description="Training program")
    year_level: str       = Field("", description="Year level within the program")
    start_date: str       = Field("", description="Rotation start date")
    photo: Optional[str]  = Field(None, description="Photo reference (URL or data URI)")
    clinical_skill_scores: List[ClinicalSkillScore] = Field(default_factory=list, description="Clinical skill behaviour ratings")


class EvaluationScores(CamelModel):
    """
    The eight competency scores of a session, each 1-5
    """
    clinical_knowledge: int    = Field(3, ge=1, le=5, description="Medical knowledge, pathophysiology, pharmacology")
    clinical_reasoning: int    = Field(3, ge=1, le=5, description="Differential diagnosis, diagnostic workup, treatment planning")
    patient_communication: int = Field(3, ge=1, le=5, description="History taking, patient education, empathy")
    professional_behavior: int = Field(3, ge=1, le=5, description="Punctuality, ethics, appearance, responsibility")
    technical_skills: int      = Field(3, ge=1, le=5, description="Physical exam, procedures, clinical techniques")
    documentation: int         = Field(3, ge=1, le=5, description="Notes, orders, prescriptions, referrals")
    teamwork: int              = Field(3, ge=1, le=5, description="Interprofessional communication, consultations")
    initiative: int            = Field(3, ge=1, le=5, description="Proactive learning, literature review, questions")


class TeachingTopicEntry(CamelModel):
    """
    Topics taught within one teaching category during a session
    """
    category: str     = Field(..., description="Teaching topic category (e.g., 'Cardiovascular')")
    topics: List[str] = Field(default_factory=list, description="Topics covered in this category")


class SessionEvaluation(CamelModel):
    """
    Evaluation of one clinical session

    The phase is derived from week_number and recomputed by the store on every save.
    objectives_achieved mixes legacy integer indices and versioned expectation ids.
    """
    id: Optional[str]                  = Field(None, description="Evaluation unique identifier (auto-generated)")
    student_id: str                    = Field(..., description="Student this evaluation belongs to")
    date: str                          = Field(..., description="Session date (format: YYYY-MM-DD)")
    week_number: int                   = Field(..., ge=1, le=52, description="Rotation week (1-52)")
    phase: Phase                       = Field("early", description="Derived from week_number: early, middle or final")
    session_type: str                  = Field("", description="Kind of session (e.g., 'Clinic Day')")
    patient_encounters: int            = Field(0, ge=0, description="Number of patients seen")
    scores: EvaluationScores           = Field(default_factory=EvaluationScores, description="Competency scores")
    strengths: str                     = Field("", description="Observed strengths")
    areas_for_improvement: str         = Field("", description="Areas for improvement")
    action_plan: str                   = Field("", description="Agreed action plan")
    preceptor_notes: str               = Field("", description="Private preceptor notes")
    overall_rating: int                = Field(3, ge=1, le=5, description="Overall session rating (1-5)")
    created_at: Optional[datetime]     = Field(default_factory=utc_now, description="Timestamp when evaluation was created")
    updated_at: Optional[datetime]     = Field(default_factory=utc_now, description="Timestamp when evaluation was last saved")
    teaching_topics: List[TeachingTopicEntry] = Field(default_factory=list, description="Teaching topics by category")
    conditions_seen: List[str]         = Field(default_factory=list, description="Conditions from the prepopulated taxonomy")
    custom_conditions: List[str]       = Field(default_factory=list, description="Free-text conditions added by the preceptor")
    objectives_achieved: List[Union[int, str]] = Field(default_factory=list, description="Legacy objective indices or expectation ids")

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        try:
            datetime.strptime(value, "%Y-%m-%d")
        except ValueError:
            raise ValueError("date must be in YYYY-MM-DD format")
        return value


class AppData(CamelModel):
    """
    The whole persisted document (unit of storage, export and import)
    """
    preceptor: PreceptorProfile         = Field(default_factory=PreceptorProfile, description="Preceptor profile")
    students: List[StudentProfile]      = Field(default_factory=list, description="All students")
    evaluations: List[SessionEvaluation] = Field(default_factory=list, description="All session evaluations")
    version: str                        = Field("1.0.0", description="Document format version")


# Derived views


class CategoryAverages(CamelModel):
    """
    Mean of each score category across a set of evaluations (zeros when empty)
    """
    scores: Dict[str, float] = Field(default_factory=dict, description="Score key -> unrounded mean")
    overall_rating: float    = Field(0.0, description="Mean overall rating")
    session_count: int       = Field(0, description="Number of evaluations averaged")


class PhaseSummary(CamelModel):
    phase: Phase
    label: str
    weeks: str
    session_count: int
    averages: CategoryAverages


class TrendDelta(CamelModel):
    """
    Change in mean competency score between first and last session by week
    """
    first_mean: float
    last_mean: float
    delta: float
    session_count: int


class ConditionCoverage(CamelModel):
    seen: List[str]         = Field(default_factory=list, description="Distinct conditions recorded, case-insensitive (taxonomy and custom)")
    matched: List[str]      = Field(default_factory=list, description="Taxonomy conditions covered")
    custom_only: List[str]  = Field(default_factory=list, description="Recorded conditions outside the taxonomy")
    total: int              = Field(0, description="Conditions in the taxonomy")
    ratio: float            = Field(0.0, description="matched / total, clamped to [0, 1]")


class OutcomeProgress(CamelModel):
    outcome_id: str
    outcome: str
    achieved: List[str]
    total: int
    ratio: float


class ObjectiveCoverage(CamelModel):
    achieved: List[str]           = Field(default_factory=list, description="Distinct versioned expectation ids achieved")
    total: int                    = Field(0, description="Checkable expectations across all outcomes")
    ratio: float                  = Field(0.0, description="len(achieved) / total")
    outcomes: List[OutcomeProgress] = Field(default_factory=list, description="Per-outcome breakdown")
    legacy_indices: List[int]     = Field(default_factory=list, description="Distinct legacy objective indices recorded")


class FirstAchieved(CamelModel):
    evaluation_id: Optional[str]
    date: str
    week_number: int


class TopicCoverage(CamelModel):
    category: str
    topics: List[str]
    session_count: int
    taxonomy_total: int
    ratio: float


class SkillProgress(CamelModel):
    skill_id: str
    category: str
    minimal_demonstrated: int
    minimal_total: int
    exemplary_demonstrated: int
    exemplary_total: int


class TimelineEntry(CamelModel):
    evaluation_id: Optional[str]
    week_number: int
    phase: Phase
    date: str
    session_type: str
    mean_score: float
    overall_rating: int


class DashboardSummary(CamelModel):
    student_count: int
    evaluation_count: int
    average_overall: float
    weeks_logged: int
    phase_counts: Dict[str, int]
    category_averages: CategoryAverages
    recent_evaluations: List[SessionEvaluation]
    conditions: ConditionCoverage
    objectives: ObjectiveCoverage
    topics: List[TopicCoverage]


class StudentProgress(CamelModel):
    student: StudentProfile
    session_count: int
    phases: List[PhaseSummary]
    trend: Optional[TrendDelta]
    timeline: List[TimelineEntry]
    conditions: ConditionCoverage
    objectives: ObjectiveCoverage
    first_achieved: Dict[str, FirstAchieved]
    topics: List[TopicCoverage]
    clinical_skills: List[SkillProgress]
