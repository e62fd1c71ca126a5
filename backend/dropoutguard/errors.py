"""Domain errors raised by the risk engine and its collaborators."""


class DropoutGuardError(Exception):
	pass


class NotFound(DropoutGuardError):
	pass


class StudentNotFound(NotFound):
	def __init__(self, student_id: str) -> None:
		super().__init__(f"Student not found: {student_id}")
		self.student_id = student_id


class PlanNotFound(NotFound):
	def __init__(self, plan_id: str) -> None:
		super().__init__(f"Recovery plan not found: {plan_id}")
		self.plan_id = plan_id


class AIUnavailable(DropoutGuardError):
	"""The AI plan adapter could not produce a plan (network, credentials, upstream error)."""


class AIInvalidResponse(AIUnavailable):
	"""The model answered, but not with a usable recovery plan."""


class AITimeout(AIUnavailable):
	pass


class PersistenceFailure(DropoutGuardError):
	pass


class SupersedeFailure(DropoutGuardError):
	"""Deactivating the previous active plan failed; generation carries on regardless."""
