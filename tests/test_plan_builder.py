"""Unit tests for the rule-based recovery plan builder."""

import pytest

from dropoutguard.plan_builder import (
	ATTENDANCE_STRATEGY,
	BASE_STRATEGIES,
	ENGAGEMENT_STRATEGY,
	build_plan,
	weak_topics_for,
)
from dropoutguard.schemas import RiskLevel, StudentPerformanceRecord


def _record(attendance=90, quizzes=(80,), engagement=80):
	return StudentPerformanceRecord(
		attendance_percentage=attendance,
		quiz_scores=list(quizzes),
		assignments_submitted=8,
		total_assignments=10,
		engagement_score=engagement,
	)


def test_at_risk_student_gets_every_weak_topic(at_risk_record):
	plan = build_plan(at_risk_record, RiskLevel.HIGH)

	assert plan.weak_topics == [
		"Attendance & Consistency",
		"Fundamental Concepts",
		"Problem Solving",
		"Study Habits",
		"Time Management",
	]


def test_strong_student_gets_default_topics(strong_record):
	plan = build_plan(strong_record, RiskLevel.LOW)
	assert plan.weak_topics == ["Advanced Topics", "Optimization"]


def test_topics_follow_individual_signals():
	assert weak_topics_for(_record(attendance=69.9)) == ["Attendance & Consistency"]
	assert weak_topics_for(_record(quizzes=[59])) == ["Fundamental Concepts", "Problem Solving"]
	assert weak_topics_for(_record(engagement=49)) == ["Study Habits", "Time Management"]
	assert weak_topics_for(_record(attendance=70, quizzes=[60], engagement=50)) == ["Advanced Topics", "Optimization"]


def test_empty_quiz_list_flags_fundamentals():
	assert weak_topics_for(_record(quizzes=[])) == ["Fundamental Concepts", "Problem Solving"]


@pytest.mark.parametrize("level,hours,durations", [
	(RiskLevel.HIGH, 4, ["2 hours", "2 hours", "2 hours", "2 hours", "2 hours", "6 hours"]),
	(RiskLevel.MEDIUM, 3, ["2 hours", "2 hours", "2 hours", "2 hours", "2 hours", "5 hours"]),
	(RiskLevel.LOW, 2, ["1 hour", "1 hour", "1 hour", "1 hour", "1 hour", "3 hours"]),
])
def test_study_hours_and_schedule_by_level(level, hours, durations):
	plan = build_plan(_record(), level)

	assert plan.daily_study_hours == hours
	assert [entry.duration for entry in plan.schedule] == durations


def test_schedule_template():
	plan = build_plan(_record(), RiskLevel.MEDIUM)

	assert [entry.day for entry in plan.schedule] == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Weekend"]
	assert plan.schedule[0].focus == "Review fundamentals"
	assert plan.schedule[-1].focus == "Self-assessment & revision"
	assert not any(entry.completed for entry in plan.schedule)


def test_resources_are_the_fixed_catalog(at_risk_record, strong_record):
	a = build_plan(at_risk_record, RiskLevel.HIGH).resources
	b = build_plan(strong_record, RiskLevel.LOW).resources

	assert a == b
	assert [r.type for r in a] == ["Video Course", "Exercises", "Community", "Mentorship"]


def test_conditional_strategies():
	assert build_plan(_record(), RiskLevel.LOW).strategies == BASE_STRATEGIES
	assert build_plan(_record(attendance=65), RiskLevel.LOW).strategies == BASE_STRATEGIES + [ATTENDANCE_STRATEGY]
	assert build_plan(_record(engagement=45), RiskLevel.LOW).strategies == BASE_STRATEGIES + [ENGAGEMENT_STRATEGY]
	assert build_plan(_record(attendance=65, engagement=45), RiskLevel.LOW).strategies == BASE_STRATEGIES + [
		ATTENDANCE_STRATEGY,
		ENGAGEMENT_STRATEGY,
	]


def test_builder_is_deterministic(at_risk_record):
	first = build_plan(at_risk_record, RiskLevel.HIGH)
	second = build_plan(at_risk_record, RiskLevel.HIGH)
	assert first.model_dump_json() == second.model_dump_json()


def test_builder_does_not_share_mutable_state(strong_record):
	plan = build_plan(strong_record, RiskLevel.LOW)
	plan.strategies.append("extra")
	plan.schedule[0].completed = True

	fresh = build_plan(strong_record, RiskLevel.LOW)
	assert "extra" not in fresh.strategies
	assert fresh.schedule[0].completed is False
