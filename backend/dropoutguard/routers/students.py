from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import NotFound, PersistenceFailure
from ..schemas import RiskAssessment, RiskLevel, RiskStats, Student, StudentIn, StudentUpdate
from ..store import Store

router = APIRouter(prefix="/students", tags=["students"])


@router.get("", response_model=List[Student])
def list_students(risk_level: Optional[RiskLevel] = None, db: Session = Depends(get_db)):
	return Store(db).list_students(risk_level)


@router.get("/stats", response_model=RiskStats)
def risk_stats(db: Session = Depends(get_db)):
	return Store(db).risk_stats()


@router.post("", response_model=Student, status_code=201)
def create_student(req: StudentIn, db: Session = Depends(get_db)):
	store = Store(db)
	if req.student_id:
		try:
			store.get_student(req.student_id)
		except NotFound:
			pass
		else:
			raise HTTPException(status_code=409, detail="student already exists")
	try:
		return store.create_student(req)
	except PersistenceFailure as e:
		raise HTTPException(status_code=500, detail=str(e))


@router.get("/{student_id}", response_model=Student)
def get_student(student_id: str, db: Session = Depends(get_db)):
	try:
		return Store(db).get_student(student_id)
	except NotFound as e:
		raise HTTPException(status_code=404, detail=str(e))


@router.post("/{student_id}/assess", response_model=RiskAssessment)
def reassess_student(student_id: str, db: Session = Depends(get_db)):
	try:
		return Store(db).reassess_student(student_id)
	except NotFound as e:
		raise HTTPException(status_code=404, detail=str(e))
	except PersistenceFailure as e:
		raise HTTPException(status_code=500, detail=str(e))


@router.patch("/{student_id}", response_model=Student)
def update_student(student_id: str, req: StudentUpdate, db: Session = Depends(get_db)):
	try:
		return Store(db).update_student(student_id, req)
	except NotFound as e:
		raise HTTPException(status_code=404, detail=str(e))
	except PersistenceFailure as e:
		raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{student_id}", status_code=204)
def delete_student(student_id: str, db: Session = Depends(get_db)):
	try:
		Store(db).delete_student(student_id)
	except NotFound as e:
		raise HTTPException(status_code=404, detail=str(e))
	except PersistenceFailure as e:
		raise HTTPException(status_code=500, detail=str(e))
