from __future__ import annotations
import json
import logging
import re
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from .errors import AIInvalidResponse, AITimeout, AIUnavailable
from .gemini_client import GeminiClient
from .plan_builder import SCHEDULE_TEMPLATE
from .risk import assignment_completion, quiz_average
from .schemas import RecoveryPlanContent, RiskLevel, StudentPerformanceRecord
from .settings import settings

logger = logging.getLogger(__name__)

RESOURCE_TYPES = ["Video Course", "Exercises", "Community", "Mentorship", "Article", "Book"]


def _extract_json_object(text: str) -> Dict[str, Any]:
	try:
		return json.loads(text)
	except Exception:
		pass
	code_block = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text)
	if code_block:
		try:
			return json.loads(code_block.group(1))
		except Exception:
			pass
	first = text.find("{")
	last = text.rfind("}")
	if first != -1 and last != -1 and last > first:
		try:
			return json.loads(text[first : last + 1])
		except Exception:
			pass
	raise AIInvalidResponse("Model did not return a JSON object")


def build_plan_prompt(record: StudentPerformanceRecord, risk_level: RiskLevel) -> str:
	days = ", ".join(day for day, _, _ in SCHEDULE_TEMPLATE)
	scores = ", ".join(f"{s:g}" for s in record.quiz_scores) or "none yet"
	return (
		"You are an academic advisor writing a personalised recovery plan for a university student at risk of dropping out.\n"
		"Student performance:\n"
		f"- Risk level: {RiskLevel(risk_level).value}\n"
		f"- Attendance: {record.attendance_percentage:g}%\n"
		f"- Quiz scores: {scores} (average {quiz_average(record.quiz_scores):.1f})\n"
		f"- Assignments submitted: {record.assignments_submitted} of {record.total_assignments} "
		f"({assignment_completion(record.assignments_submitted, record.total_assignments):.0f}%)\n"
		f"- Engagement score: {record.engagement_score:g}/100\n\n"
		"Requirements:\n"
		"- weak_topics: 2-5 short topic labels the student should work on.\n"
		"- daily_study_hours: integer hours per day (High risk 4, Medium 3, Low 2 as a guide).\n"
		f"- schedule: exactly one entry per period in this order: {days}. Each entry has day, focus, duration (e.g. \"2 hours\").\n"
		f"- resources: 3-5 entries with title, type (one of: {', '.join(RESOURCE_TYPES)}), url, description.\n"
		"- strategies: 5-7 concrete, actionable study strategies.\n\n"
		"Return ONLY a JSON object with keys: weak_topics, daily_study_hours, schedule, resources, strategies."
	)


def parse_plan_response(text: str) -> RecoveryPlanContent:
	data = _extract_json_object(text)
	if not isinstance(data, dict):
		raise AIInvalidResponse("Model response is not a JSON object")
	# Completion is tracked by the student, never by the model
	for entry in data.get("schedule") or []:
		if isinstance(entry, dict):
			entry["completed"] = False
	try:
		return RecoveryPlanContent.model_validate(data)
	except ValidationError as exc:
		raise AIInvalidResponse(f"Model response is not a valid recovery plan: {exc.error_count()} error(s)") from exc


class GeminiPlanAdapter:
	"""Asks Gemini for a recovery plan; every failure surfaces as AIUnavailable."""

	def __init__(
		self,
		*,
		api_key: Optional[str] = None,
		model: Optional[str] = None,
		timeout: Optional[float] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key
		self.model = model or settings.gemini_model
		self.timeout = timeout or settings.ai_plan_timeout_seconds
		self._transport = transport

	async def complete(self, record: StudentPerformanceRecord, risk_level: RiskLevel) -> RecoveryPlanContent:
		try:
			client = GeminiClient(self.api_key, model=self.model, timeout=self.timeout, transport=self._transport)
		except ValueError as exc:
			raise AIUnavailable(str(exc)) from exc
		async with client:
			try:
				text = await client.generate(build_plan_prompt(record, risk_level), json_output=True, temperature=0.4)
			except httpx.TimeoutException as exc:
				raise AITimeout(f"Gemini request timed out after {self.timeout}s") from exc
			except Exception as exc:
				raise AIUnavailable(f"Gemini request failed: {exc}") from exc
		plan = parse_plan_response(text)
		logger.debug("Gemini (%s) returned a plan with %d weak topics", self.model, len(plan.weak_topics))
		return plan
