"""Recovery plan generation: AI first, rule-based plan as the fallback."""

from __future__ import annotations
import asyncio
import logging
from typing import Any, Optional, Tuple

from sqlalchemy.orm import Session

from .ai_plan import GeminiPlanAdapter
from .errors import SupersedeFailure
from .models import utcnow
from .plan_builder import build_plan
from .schemas import AIProvenance, ManualProvenance, Provenance, RecoveryPlanContent, Student
from .settings import settings
from .store import Store

logger = logging.getLogger(__name__)


class RecoveryPlanGenerator:
	"""
	Creates a new active recovery plan for a student.

	Steps run strictly in order: fetch the student, deactivate any active plans,
	ask the AI adapter for a plan (falling back to build_plan on
	any failure), then persist the result as the student's only active plan.
	Concurrent calls for the same student are not serialised; the last write wins.

	Args:
		store: Student and plan store
		ai_adapter: Object with a `model` attribute and an async
			`complete(record, risk_level)` method, or None to always use the
			rule-based plan
		ai_timeout: Seconds to wait for the adapter before falling back
	"""

	def __init__(self, store: Store, ai_adapter: Optional[Any] = None, *, ai_timeout: Optional[float] = None) -> None:
		self.store = store
		self.ai_adapter = ai_adapter
		self.ai_timeout = ai_timeout if ai_timeout is not None else settings.ai_plan_timeout_seconds

	async def generate(self, student_id: str) -> str:
		student = self.store.get_student(student_id)
		self._supersede(student_id)
		content, provenance = await self._generate_content(student)
		plan_id = self.store.save_plan(student_id, student.risk_level, content, provenance, now=utcnow())
		logger.info("Created %s recovery plan %s for student %s", provenance.kind, plan_id, student_id)
		return plan_id

	def _supersede(self, student_id: str) -> None:
		# Clears every active plan, including ones left by an earlier failed supersede
		try:
			for stale in self.store.list_active_plans(student_id):
				self.store.mark_inactive(stale.plan_id)
		except Exception as exc:
			err = SupersedeFailure(f"Could not deactivate previous plan for {student_id}")
			logger.warning("%s: %s", err, exc)

	async def _generate_content(self, student: Student) -> Tuple[RecoveryPlanContent, Provenance]:
		record = student.to_record()
		if self.ai_adapter is not None:
			try:
				content = await asyncio.wait_for(
					self.ai_adapter.complete(record, student.risk_level),
					timeout=self.ai_timeout,
				)
				return content, AIProvenance(model=self.ai_adapter.model)
			except asyncio.TimeoutError:
				logger.warning("AI plan generation timed out after %ss for %s; using rule-based plan", self.ai_timeout, student.student_id)
			except Exception as exc:
				logger.warning("AI plan generation failed for %s (%s); using rule-based plan", student.student_id, exc)
		else:
			logger.info("No AI adapter configured; using rule-based plan for %s", student.student_id)
		return build_plan(record, student.risk_level), ManualProvenance()


def default_ai_adapter() -> Optional[GeminiPlanAdapter]:
	if not settings.gemini_configured:
		return None
	return GeminiPlanAdapter()


async def generate_recovery_plan(db: Session, student_id: str, *, ai_adapter: Optional[Any] = None) -> str:
	"""Generate a plan using the configured Gemini adapter unless one is passed in."""
	adapter = ai_adapter if ai_adapter is not None else default_ai_adapter()
	return await RecoveryPlanGenerator(Store(db), adapter).generate(student_id)
