"""Rule-based recovery plan, used whenever the AI path is unavailable."""

from __future__ import annotations
import math
from typing import Dict, List, Tuple

from .risk import quiz_average
from .schemas import RecoveryPlanContent, Resource, RiskLevel, ScheduleEntry, StudentPerformanceRecord


STUDY_HOURS_BY_LEVEL: Dict[RiskLevel, int] = {
	RiskLevel.HIGH: 4,
	RiskLevel.MEDIUM: 3,
	RiskLevel.LOW: 2,
}

# (day, focus, fraction of the daily study hours)
SCHEDULE_TEMPLATE: List[Tuple[str, str, float]] = [
	("Monday", "Review fundamentals", 0.5),
	("Tuesday", "Practice problems", 0.5),
	("Wednesday", "Concept clarification", 0.4),
	("Thursday", "Group study session", 0.5),
	("Friday", "Mock tests", 0.4),
	("Weekend", "Self-assessment & revision", 1.5),
]

RESOURCE_CATALOG: List[Dict[str, str]] = [
	{"title": "Khan Academy - Core Concepts", "type": "Video Course", "url": "#", "description": "Comprehensive video tutorials"},
	{"title": "Practice Problem Set", "type": "Exercises", "url": "#", "description": "Hands-on practice exercises"},
	{"title": "Study Group Discord", "type": "Community", "url": "#", "description": "Connect with peers"},
	{"title": "Office Hours with TA", "type": "Mentorship", "url": "#", "description": "Get personalized help"},
]

BASE_STRATEGIES: List[str] = [
	"Break study sessions into 25-minute focused blocks (Pomodoro technique)",
	"Review notes within 24 hours of each lecture",
	"Form a study group with 2-3 classmates",
	"Use active recall instead of passive reading",
	"Attend all office hours for difficult topics",
]
ATTENDANCE_STRATEGY = "Set daily reminders for class attendance"
ENGAGEMENT_STRATEGY = "Reduce distractions during study time"

ATTENDANCE_TOPIC_THRESHOLD = 70
QUIZ_TOPIC_THRESHOLD = 60
ENGAGEMENT_TOPIC_THRESHOLD = 50


def weak_topics_for(record: StudentPerformanceRecord) -> List[str]:
	topics: List[str] = []
	if record.attendance_percentage < ATTENDANCE_TOPIC_THRESHOLD:
		topics.append("Attendance & Consistency")
	if quiz_average(record.quiz_scores) < QUIZ_TOPIC_THRESHOLD:
		topics.extend(["Fundamental Concepts", "Problem Solving"])
	if record.engagement_score < ENGAGEMENT_TOPIC_THRESHOLD:
		topics.extend(["Study Habits", "Time Management"])
	if not topics:
		topics.extend(["Advanced Topics", "Optimization"])
	return topics


def _format_hours(hours: int) -> str:
	return f"{hours} hour" if hours == 1 else f"{hours} hours"


def weekly_schedule(daily_study_hours: int) -> List[ScheduleEntry]:
	return [
		ScheduleEntry(day=day, focus=focus, duration=_format_hours(math.ceil(daily_study_hours * weight)))
		for day, focus, weight in SCHEDULE_TEMPLATE
	]


def strategies_for(record: StudentPerformanceRecord) -> List[str]:
	strategies = list(BASE_STRATEGIES)
	if record.attendance_percentage < ATTENDANCE_TOPIC_THRESHOLD:
		strategies.append(ATTENDANCE_STRATEGY)
	if record.engagement_score < ENGAGEMENT_TOPIC_THRESHOLD:
		strategies.append(ENGAGEMENT_STRATEGY)
	return strategies


def build_plan(record: StudentPerformanceRecord, risk_level: RiskLevel) -> RecoveryPlanContent:
	"""Derive a recovery plan from the student's signals; same input, same plan."""
	hours = STUDY_HOURS_BY_LEVEL[RiskLevel(risk_level)]
	return RecoveryPlanContent(
		weak_topics=weak_topics_for(record),
		daily_study_hours=hours,
		schedule=weekly_schedule(hours),
		resources=[Resource(**item) for item in RESOURCE_CATALOG],
		strategies=strategies_for(record),
	)
