"""SQLAlchemy-backed student and recovery plan store."""

from __future__ import annotations
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import PersistenceFailure, PlanNotFound, StudentNotFound
from .models import RecoveryPlanRow, StudentRow, utcnow
from .risk import assess_risk
from .schemas import (
	AIProvenance,
	ManualProvenance,
	Provenance,
	RecoveryPlan,
	RecoveryPlanContent,
	RiskAssessment,
	RiskLevel,
	RiskStats,
	Student,
	StudentIn,
	StudentUpdate,
	StudentPerformanceRecord,
)

logger = logging.getLogger(__name__)


def _record_from_row(row: StudentRow) -> StudentPerformanceRecord:
	return StudentPerformanceRecord(
		attendance_percentage=row.attendance_percentage,
		quiz_scores=list(row.quiz_scores or []),
		assignments_submitted=row.assignments_submitted,
		total_assignments=row.total_assignments,
		engagement_score=row.engagement_score,
	)


def _student_from_row(row: StudentRow) -> Student:
	if row.risk_level is None or row.risk_score is None:
		# Never assessed: score the current signals without persisting
		assessment = assess_risk(_record_from_row(row))
	else:
		assessment = RiskAssessment(
			risk_score=row.risk_score,
			risk_level=RiskLevel(row.risk_level),
			risk_factors=list(row.risk_factors or []),
		)
	return Student(
		student_id=row.student_id,
		name=row.name,
		email=row.email,
		course=row.course,
		attendance_percentage=row.attendance_percentage,
		quiz_scores=list(row.quiz_scores or []),
		assignments_submitted=row.assignments_submitted,
		total_assignments=row.total_assignments,
		engagement_score=row.engagement_score,
		risk_level=assessment.risk_level,
		risk_score=assessment.risk_score,
		risk_factors=list(assessment.risk_factors),
		last_risk_assessment_at=row.last_risk_assessment_at,
	)


def _provenance_from_row(row: RecoveryPlanRow) -> Provenance:
	if row.generated_by == "ai" and row.ai_model:
		return AIProvenance(model=row.ai_model)
	return ManualProvenance()


def _plan_from_row(row: RecoveryPlanRow) -> RecoveryPlan:
	return RecoveryPlan(
		plan_id=row.plan_id,
		student_id=row.student_id,
		risk_level=RiskLevel(row.risk_level),
		weak_topics=list(row.weak_topics),
		daily_study_hours=row.daily_study_hours,
		schedule=list(row.schedule),
		resources=list(row.resources),
		strategies=list(row.strategies),
		provenance=_provenance_from_row(row),
		is_active=row.is_active,
		progress_percentage=row.progress_percentage,
		generated_at=row.generated_at,
		created_at=row.created_at,
		updated_at=row.updated_at,
	)


class Store:
	def __init__(self, db: Session) -> None:
		self.db = db

	def _commit(self, what: str) -> None:
		try:
			self.db.commit()
		except SQLAlchemyError as exc:
			self.db.rollback()
			logger.error("Failed to %s: %s", what, exc)
			raise PersistenceFailure(f"Failed to {what}") from exc

	# ---- Students ----

	def create_student(self, data: StudentIn) -> Student:
		assessment = assess_risk(data.to_record())
		now = utcnow()
		row = StudentRow(
			student_id=data.student_id or uuid.uuid4().hex,
			name=data.name,
			email=data.email,
			course=data.course,
			attendance_percentage=data.attendance_percentage,
			quiz_scores=list(data.quiz_scores),
			assignments_submitted=data.assignments_submitted,
			total_assignments=data.total_assignments,
			engagement_score=data.engagement_score,
			risk_level=assessment.risk_level.value,
			risk_score=assessment.risk_score,
			risk_factors=list(assessment.risk_factors),
			last_risk_assessment_at=now,
			created_at=now,
			updated_at=now,
		)
		self.db.add(row)
		self._commit(f"create student {row.student_id}")
		return _student_from_row(row)

	def _student_row(self, student_id: str) -> StudentRow:
		row = self.db.get(StudentRow, student_id)
		if row is None:
			raise StudentNotFound(student_id)
		return row

	def get_student(self, student_id: str) -> Student:
		return _student_from_row(self._student_row(student_id))

	def list_students(self, risk_level: Optional[RiskLevel] = None) -> List[Student]:
		q = self.db.query(StudentRow)
		if risk_level is not None:
			q = q.filter(StudentRow.risk_level == RiskLevel(risk_level).value).order_by(StudentRow.risk_score.desc())
		else:
			q = q.order_by(StudentRow.name.asc())
		return [_student_from_row(row) for row in q.all()]

	def risk_stats(self) -> RiskStats:
		counts = {level: 0 for level in RiskLevel}
		for student in self.list_students():
			counts[student.risk_level] += 1
		return RiskStats(
			total=sum(counts.values()),
			high=counts[RiskLevel.HIGH],
			medium=counts[RiskLevel.MEDIUM],
			low=counts[RiskLevel.LOW],
		)

	def update_student(self, student_id: str, updates: StudentUpdate) -> Student:
		"""Apply a partial edit and re-score the student in the same commit."""
		row = self._student_row(student_id)
		for field, value in updates.model_dump(exclude_unset=True).items():
			if value is None and field not in ("email", "course"):
				continue
			setattr(row, field, list(value) if field == "quiz_scores" else value)
		row.updated_at = utcnow()
		self._apply_assessment(row, assess_risk(_record_from_row(row)))
		self._commit(f"update student {student_id}")
		return _student_from_row(row)

	def delete_student(self, student_id: str) -> None:
		row = self._student_row(student_id)
		self.db.query(RecoveryPlanRow).filter(RecoveryPlanRow.student_id == student_id).delete(synchronize_session=False)
		self.db.delete(row)
		self._commit(f"delete student {student_id}")

	def reassess_student(self, student_id: str) -> RiskAssessment:
		row = self._student_row(student_id)
		assessment = assess_risk(_record_from_row(row))
		self._apply_assessment(row, assessment)
		self._commit(f"update risk assessment for {student_id}")
		return assessment

	@staticmethod
	def _apply_assessment(row: StudentRow, assessment: RiskAssessment) -> None:
		row.risk_level = assessment.risk_level.value
		row.risk_score = assessment.risk_score
		row.risk_factors = list(assessment.risk_factors)
		row.last_risk_assessment_at = utcnow()

	# ---- Recovery plans ----

	def _plan_row(self, plan_id: str) -> RecoveryPlanRow:
		row = self.db.get(RecoveryPlanRow, plan_id)
		if row is None:
			raise PlanNotFound(plan_id)
		return row

	def get_plan(self, plan_id: str) -> RecoveryPlan:
		return _plan_from_row(self._plan_row(plan_id))

	def get_active_plan(self, student_id: str) -> Optional[RecoveryPlan]:
		row = (
			self.db.query(RecoveryPlanRow)
			.filter(RecoveryPlanRow.student_id == student_id, RecoveryPlanRow.is_active.is_(True))
			.order_by(RecoveryPlanRow.created_at.desc())
			.first()
		)
		return _plan_from_row(row) if row is not None else None

	def list_plans(self, student_id: str) -> List[RecoveryPlan]:
		rows = (
			self.db.query(RecoveryPlanRow)
			.filter(RecoveryPlanRow.student_id == student_id)
			.order_by(RecoveryPlanRow.created_at.desc())
			.all()
		)
		return [_plan_from_row(row) for row in rows]

	def list_active_plans(self, student_id: str) -> List[RecoveryPlan]:
		rows = (
			self.db.query(RecoveryPlanRow)
			.filter(RecoveryPlanRow.student_id == student_id, RecoveryPlanRow.is_active.is_(True))
			.order_by(RecoveryPlanRow.created_at.desc())
			.all()
		)
		return [_plan_from_row(row) for row in rows]

	def count_active_plans(self, student_id: str) -> int:
		return (
			self.db.query(func.count(RecoveryPlanRow.plan_id))
			.filter(RecoveryPlanRow.student_id == student_id, RecoveryPlanRow.is_active.is_(True))
			.scalar()
		) or 0

	def mark_inactive(self, plan_id: str) -> None:
		row = self._plan_row(plan_id)
		row.is_active = False
		row.updated_at = utcnow()
		self._commit(f"deactivate plan {plan_id}")

	def save_plan(
		self,
		student_id: str,
		risk_level: RiskLevel,
		content: RecoveryPlanContent,
		provenance: Provenance,
		*,
		now: Optional[datetime] = None,
	) -> str:
		now = now or utcnow()
		plan_id = uuid.uuid4().hex
		schedule = [{**entry.model_dump(), "completed": False} for entry in content.schedule]
		row = RecoveryPlanRow(
			plan_id=plan_id,
			student_id=student_id,
			risk_level=RiskLevel(risk_level).value,
			weak_topics=list(content.weak_topics),
			daily_study_hours=content.daily_study_hours,
			schedule=schedule,
			resources=[r.model_dump() for r in content.resources],
			strategies=list(content.strategies),
			generated_by=provenance.kind,
			ai_model=provenance.model if isinstance(provenance, AIProvenance) else None,
			is_active=True,
			progress_percentage=0.0,
			generated_at=now,
			created_at=now,
			updated_at=now,
		)
		self.db.add(row)
		self._commit(f"save recovery plan for {student_id}")
		return plan_id

	def mark_schedule_item_completed(self, plan_id: str, day_index: int, completed: bool = True) -> RecoveryPlan:
		row = self._plan_row(plan_id)
		schedule = [dict(item) for item in row.schedule]
		if day_index < 0 or day_index >= len(schedule):
			raise ValueError(f"day_index must be between 0 and {len(schedule) - 1}")
		schedule[day_index]["completed"] = bool(completed)
		done = sum(1 for item in schedule if item.get("completed"))
		# Reassign so the JSON column is flagged dirty
		row.schedule = schedule
		row.progress_percentage = done / len(schedule) * 100
		row.updated_at = utcnow()
		self._commit(f"update schedule of plan {plan_id}")
		return _plan_from_row(row)
