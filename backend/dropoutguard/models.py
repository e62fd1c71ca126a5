from __future__ import annotations
from datetime import datetime, timezone
from sqlalchemy import Boolean, Column, DateTime, Float, Index, Integer, JSON, String
from .db import Base


def utcnow() -> datetime:
	return datetime.now(timezone.utc)


class StudentRow(Base):
	__tablename__ = "students"
	student_id = Column(String(64), primary_key=True, index=True)
	name = Column(String(256), nullable=False)
	email = Column(String(256), nullable=True)
	course = Column(String(256), nullable=True)
	# Performance signals
	attendance_percentage = Column(Float, default=0.0, nullable=False)
	quiz_scores = Column(JSON, default=list, nullable=False)
	assignments_submitted = Column(Integer, default=0, nullable=False)
	total_assignments = Column(Integer, default=0, nullable=False)
	engagement_score = Column(Float, default=0.0, nullable=False)
	# Latest risk assessment
	risk_level = Column(String(16), nullable=True, index=True)
	risk_score = Column(Integer, nullable=True)
	risk_factors = Column(JSON, default=list, nullable=False)
	last_risk_assessment_at = Column(DateTime, nullable=True)
	created_at = Column(DateTime, default=utcnow, nullable=False)
	updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class RecoveryPlanRow(Base):
	__tablename__ = "recovery_plans"
	plan_id = Column(String(64), primary_key=True)
	student_id = Column(String(64), nullable=False, index=True)
	risk_level = Column(String(16), nullable=False)
	weak_topics = Column(JSON, nullable=False)
	daily_study_hours = Column(Integer, nullable=False)
	schedule = Column(JSON, nullable=False)  # list of {day, focus, duration, completed}
	resources = Column(JSON, nullable=False)
	strategies = Column(JSON, nullable=False)
	# "ai" or "manual"; ai_model is set only for "ai"
	generated_by = Column(String(16), nullable=False)
	ai_model = Column(String(128), nullable=True)
	is_active = Column(Boolean, default=True, nullable=False)
	progress_percentage = Column(Float, default=0.0, nullable=False)
	generated_at = Column(DateTime, default=utcnow, nullable=False)
	created_at = Column(DateTime, default=utcnow, nullable=False)
	updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

	__table_args__ = (Index("ix_recovery_plans_student_active", "student_id", "is_active"),)
