from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class RiskLevel(str, Enum):
	LOW = "Low"
	MEDIUM = "Medium"
	HIGH = "High"


ResourceType = Literal["Video Course", "Exercises", "Community", "Mentorship", "Article", "Book"]


class StudentPerformanceRecord(BaseModel):
	"""Snapshot of the signals risk scoring and plan building work from.

	Producers keep percentage-like fields within 0-100; nothing here clamps them.
	"""
	model_config = ConfigDict(frozen=True)

	attendance_percentage: float
	quiz_scores: List[float] = Field(default_factory=list)
	assignments_submitted: int = 0
	total_assignments: int = 0
	engagement_score: float


class RiskAssessment(BaseModel):
	model_config = ConfigDict(frozen=True)

	risk_score: int
	risk_level: RiskLevel
	risk_factors: List[str]


class ScheduleEntry(BaseModel):
	day: str
	focus: str
	duration: str
	completed: bool = False


class Resource(BaseModel):
	title: str
	type: ResourceType
	url: str
	description: Optional[str] = None


class RecoveryPlanContent(BaseModel):
	weak_topics: List[str] = Field(min_length=1)
	daily_study_hours: int = Field(ge=1, le=24)
	schedule: List[ScheduleEntry] = Field(min_length=1)
	resources: List[Resource]
	strategies: List[str]


class ManualProvenance(BaseModel):
	model_config = ConfigDict(frozen=True)

	kind: Literal["manual"] = "manual"


class AIProvenance(BaseModel):
	model_config = ConfigDict(frozen=True)

	kind: Literal["ai"] = "ai"
	model: str = Field(min_length=1)


Provenance = Annotated[Union[ManualProvenance, AIProvenance], Field(discriminator="kind")]


class RecoveryPlan(RecoveryPlanContent):
	plan_id: str
	student_id: str
	risk_level: RiskLevel
	provenance: Provenance
	is_active: bool
	progress_percentage: float = 0.0
	generated_at: datetime
	created_at: datetime
	updated_at: datetime


class StudentIn(BaseModel):
	student_id: Optional[str] = None
	name: str
	email: Optional[str] = None
	course: Optional[str] = None
	attendance_percentage: float = Field(ge=0, le=100)
	quiz_scores: List[float] = Field(default_factory=list)
	assignments_submitted: int = Field(default=0, ge=0)
	total_assignments: int = Field(default=0, ge=0)
	engagement_score: float = Field(ge=0, le=100)

	def to_record(self) -> StudentPerformanceRecord:
		return StudentPerformanceRecord(
			attendance_percentage=self.attendance_percentage,
			quiz_scores=list(self.quiz_scores),
			assignments_submitted=self.assignments_submitted,
			total_assignments=self.total_assignments,
			engagement_score=self.engagement_score,
		)


class StudentUpdate(BaseModel):
	"""Partial student edit; omitted fields keep their stored value."""

	name: Optional[str] = None
	email: Optional[str] = None
	course: Optional[str] = None
	attendance_percentage: Optional[float] = Field(default=None, ge=0, le=100)
	quiz_scores: Optional[List[float]] = None
	assignments_submitted: Optional[int] = Field(default=None, ge=0)
	total_assignments: Optional[int] = Field(default=None, ge=0)
	engagement_score: Optional[float] = Field(default=None, ge=0, le=100)


class Student(BaseModel):
	student_id: str
	name: str
	email: Optional[str] = None
	course: Optional[str] = None
	attendance_percentage: float
	quiz_scores: List[float]
	assignments_submitted: int
	total_assignments: int
	engagement_score: float
	risk_level: RiskLevel
	risk_score: int
	risk_factors: List[str]
	last_risk_assessment_at: Optional[datetime] = None

	def to_record(self) -> StudentPerformanceRecord:
		return StudentPerformanceRecord(
			attendance_percentage=self.attendance_percentage,
			quiz_scores=list(self.quiz_scores),
			assignments_submitted=self.assignments_submitted,
			total_assignments=self.total_assignments,
			engagement_score=self.engagement_score,
		)


class RiskStats(BaseModel):
	total: int
	high: int
	medium: int
	low: int
