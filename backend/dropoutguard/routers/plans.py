from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import NotFound, PersistenceFailure
from ..recovery import generate_recovery_plan
from ..schemas import RecoveryPlan
from ..store import Store

router = APIRouter(prefix="/plans", tags=["recovery_plans"])


class GenerateResponse(BaseModel):
	plan_id: str


class ScheduleItemUpdate(BaseModel):
	completed: bool = True


@router.post("/students/{student_id}/generate", response_model=GenerateResponse, status_code=201)
async def generate(student_id: str, db: Session = Depends(get_db)):
	try:
		plan_id = await generate_recovery_plan(db, student_id)
	except NotFound as e:
		raise HTTPException(status_code=404, detail=str(e))
	except PersistenceFailure:
		raise HTTPException(status_code=500, detail="could not generate plan")
	return GenerateResponse(plan_id=plan_id)


@router.get("/students/{student_id}/active", response_model=RecoveryPlan)
def active_plan(student_id: str, db: Session = Depends(get_db)):
	plan = Store(db).get_active_plan(student_id)
	if plan is None:
		raise HTTPException(status_code=404, detail="No active recovery plan")
	return plan


@router.get("/students/{student_id}/history", response_model=List[RecoveryPlan])
def plan_history(student_id: str, db: Session = Depends(get_db)):
	return Store(db).list_plans(student_id)


@router.get("/{plan_id}", response_model=RecoveryPlan)
def get_plan(plan_id: str, db: Session = Depends(get_db)):
	try:
		return Store(db).get_plan(plan_id)
	except NotFound as e:
		raise HTTPException(status_code=404, detail=str(e))


@router.post("/{plan_id}/schedule/{day_index}", response_model=RecoveryPlan)
def mark_schedule_item(plan_id: str, day_index: int, req: ScheduleItemUpdate, db: Session = Depends(get_db)):
	try:
		return Store(db).mark_schedule_item_completed(plan_id, day_index, req.completed)
	except NotFound as e:
		raise HTTPException(status_code=404, detail=str(e))
	except ValueError as e:
		raise HTTPException(status_code=400, detail=str(e))
	except PersistenceFailure as e:
		raise HTTPException(status_code=500, detail=str(e))
