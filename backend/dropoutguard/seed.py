"""Load the demo roster and give every High/Medium risk student a recovery plan.

Run with: python -m dropoutguard.seed
"""

from __future__ import annotations
import asyncio
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from .db import SessionLocal, init_db
from .errors import NotFound
from .recovery import RecoveryPlanGenerator
from .schemas import RiskLevel, StudentIn
from .store import Store

logger = logging.getLogger(__name__)


DEMO_STUDENTS: List[Dict[str, Any]] = [
	{"student_id": "STU001", "name": "Marcus Chen", "course": "Data Structures", "attendance_percentage": 45, "quiz_scores": [42, 38, 35, 40, 32, 28, 25, 30], "assignments_submitted": 3, "total_assignments": 10, "engagement_score": 25},
	{"student_id": "STU002", "name": "Priya Patel", "course": "Machine Learning Basics", "attendance_percentage": 52, "quiz_scores": [55, 48, 42, 38, 35, 30, 28, 25], "assignments_submitted": 4, "total_assignments": 10, "engagement_score": 30},
	{"student_id": "STU003", "name": "Emma Johnson", "course": "Web Development", "attendance_percentage": 68, "quiz_scores": [65, 58, 62, 55, 60, 52, 58, 55], "assignments_submitted": 6, "total_assignments": 10, "engagement_score": 55},
	{"student_id": "STU004", "name": "David Kim", "course": "Computer Science 101", "attendance_percentage": 72, "quiz_scores": [70, 62, 58, 65, 55, 60, 52, 58], "assignments_submitted": 7, "total_assignments": 10, "engagement_score": 58},
	{"student_id": "STU005", "name": "Sofia Rodriguez", "course": "Database Systems", "attendance_percentage": 65, "quiz_scores": [58, 55, 60, 52, 58, 55, 50, 55], "assignments_submitted": 6, "total_assignments": 10, "engagement_score": 52},
	{"student_id": "STU006", "name": "Alex Thompson", "course": "Data Structures", "attendance_percentage": 70, "quiz_scores": [62, 58, 55, 60, 58, 62, 55, 58], "assignments_submitted": 7, "total_assignments": 10, "engagement_score": 60},
	{"student_id": "STU007", "name": "Jessica Liu", "course": "Machine Learning Basics", "attendance_percentage": 95, "quiz_scores": [92, 88, 95, 90, 87, 93, 91, 89], "assignments_submitted": 10, "total_assignments": 10, "engagement_score": 92},
	{"student_id": "STU008", "name": "Ryan O'Connor", "course": "Web Development", "attendance_percentage": 88, "quiz_scores": [85, 82, 88, 80, 86, 84, 87, 83], "assignments_submitted": 9, "total_assignments": 10, "engagement_score": 85},
	{"student_id": "STU009", "name": "Aisha Mohammed", "course": "Computer Science 101", "attendance_percentage": 92, "quiz_scores": [90, 85, 92, 88, 91, 87, 89, 86], "assignments_submitted": 10, "total_assignments": 10, "engagement_score": 88},
	{"student_id": "STU010", "name": "Tyler Washington", "course": "Database Systems", "attendance_percentage": 90, "quiz_scores": [88, 84, 90, 82, 88, 85, 86, 84], "assignments_submitted": 9, "total_assignments": 10, "engagement_score": 82},
]


async def seed(db: Session, *, ai_adapter: Optional[Any] = None) -> Dict[str, int]:
	"""Create missing demo students and plans; existing rows are left alone."""
	store = Store(db)
	generator = RecoveryPlanGenerator(store, ai_adapter)
	created = plans = 0
	for raw in DEMO_STUDENTS:
		data = StudentIn(email=f"{raw['name'].split()[0].lower()}@university.edu", **raw)
		try:
			student = store.get_student(data.student_id)
			logger.info("Student %s already exists, skipping", data.student_id)
		except NotFound:
			student = store.create_student(data)
			created += 1
		if student.risk_level == RiskLevel.LOW or store.get_active_plan(student.student_id) is not None:
			continue
		await generator.generate(student.student_id)
		plans += 1
	return {"students": created, "plans": plans}


def main() -> None:
	logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
	init_db()
	db = SessionLocal()
	try:
		result = asyncio.run(seed(db))
	finally:
		db.close()
	logger.info("Seeded %d students and %d recovery plans", result["students"], result["plans"])


if __name__ == "__main__":
	main()
