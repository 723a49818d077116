from __future__ import annotations
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..assessment_store import list_assessments, serialize_assessment
from ..db import get_db
from ..learning_path_store import serialize_learning_path
from ..models import AuthUser, LearningPath
from .auth import User, get_current_user

router = APIRouter(prefix="/export", tags=["export"])


@router.get("/json")
def export_json(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	account = db.get(AuthUser, user.username)
	path = db.get(LearningPath, user.username)
	payload = {
		"exportedAt": datetime.utcnow().isoformat(),
		"user": {"username": user.username, "email": account.email if account else None},
		"assessments": [serialize_assessment(a) for a in list_assessments(db, user.username)],
		"learningPath": serialize_learning_path(path) if path else None,
	}
	filename = f"learning-path-{user.username}.json"
	return JSONResponse(payload, headers={"Content-Disposition": f'attachment; filename="{filename}"'})
