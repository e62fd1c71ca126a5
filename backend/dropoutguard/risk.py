"""Additive point-based dropout risk scoring."""

from __future__ import annotations
from typing import List, Sequence

from .schemas import RiskAssessment, RiskLevel, StudentPerformanceRecord


HIGH_RISK_THRESHOLD = 70
MEDIUM_RISK_THRESHOLD = 40
MAX_RISK_SCORE = 100


def quiz_average(quiz_scores: Sequence[float]) -> float:
	"""Mean quiz score; a student with no quizzes averages 0."""
	if not quiz_scores:
		return 0.0
	return sum(quiz_scores) / len(quiz_scores)


def assignment_completion(submitted: int, total: int) -> float:
	"""Percentage of assignments submitted; 0 when nothing has been assigned yet."""
	if total <= 0:
		return 0.0
	return submitted / total * 100


def risk_level_for_score(risk_score: float) -> RiskLevel:
	if risk_score >= HIGH_RISK_THRESHOLD:
		return RiskLevel.HIGH
	elif risk_score >= MEDIUM_RISK_THRESHOLD:
		return RiskLevel.MEDIUM
	else:
		return RiskLevel.LOW


def assess_risk(record: StudentPerformanceRecord) -> RiskAssessment:
	"""
	Score a student's dropout risk.

	Four categories are checked in order (attendance, quiz average, assignment
	completion, engagement). Each adds the points of at most one bucket and
	records that bucket's label as a risk factor.

	Args:
		record: Performance snapshot to score

	Returns:
		RiskAssessment with the clamped score, its level and the fired factors
	"""
	points = 0
	factors: List[str] = []

	# Attendance (0-30 points)
	if record.attendance_percentage < 60:
		points += 30
		factors.append("Low attendance")
	elif record.attendance_percentage < 75:
		points += 15
		factors.append("Below average attendance")

	# Quiz scores (0-30 points)
	avg_quiz = quiz_average(record.quiz_scores)
	if avg_quiz < 50:
		points += 30
		factors.append("Poor quiz performance")
	elif avg_quiz < 65:
		points += 15
		factors.append("Below average quiz scores")

	# Assignment completion (0-20 points)
	completion = assignment_completion(record.assignments_submitted, record.total_assignments)
	if completion < 50:
		points += 20
		factors.append("Low assignment completion")
	elif completion < 70:
		points += 10
		factors.append("Below average assignment completion")

	# Engagement (0-20 points)
	if record.engagement_score < 40:
		points += 20
		factors.append("Low engagement")
	elif record.engagement_score < 60:
		points += 10
		factors.append("Below average engagement")

	risk_score = min(MAX_RISK_SCORE, points)
	return RiskAssessment(
		risk_score=risk_score,
		risk_level=risk_level_for_score(risk_score),
		risk_factors=factors,
	)
