from __future__ import annotations
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..assessment_store import list_assessments, summarize
from ..db import get_db
from ..errors import InputValidationError
from ..learning_path_store import (
	get_learning_path,
	progress_summary,
	reset_learning_path,
	save_learning_path,
	serialize_learning_path,
	serialize_topic,
	update_topic_progress,
)
from ..recommendations import generate_learning_path, next_recommendations
from .auth import User, get_current_user

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


class ProgressRequest(BaseModel):
	status: str


@router.post("/generate", status_code=201)
async def generate(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	assessments = list_assessments(db, user.username)
	if not assessments:
		raise InputValidationError("Please complete at least one assessment before generating a learning path")
	roadmap = await generate_learning_path(summarize(assessments))
	path = save_learning_path(db, user.username, roadmap)
	return {
		"message": "Learning path generated successfully",
		"overview": roadmap.overview,
		"estimatedDuration": roadmap.estimated_duration,
		"isAIGenerated": roadmap.is_ai_generated,
		"learningPath": serialize_learning_path(path),
	}


@router.get("/path")
def learning_path(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	return serialize_learning_path(get_learning_path(db, user.username))


@router.put("/progress/{topic_index}")
def update_progress(
	topic_index: int,
	req: ProgressRequest,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
):
	path = update_topic_progress(db, user.username, topic_index, req.status)
	return {
		"message": "Progress updated successfully",
		"topic": serialize_topic(path.topics[topic_index]),
		"overallProgress": progress_summary(path),
	}


@router.get("/next")
async def next_steps(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	path = get_learning_path(db, user.username)
	topics = [serialize_topic(t) for t in path.topics]
	recommendations = await next_recommendations(topics)
	return {
		"progress": path.progress_percentage,
		"completedCount": path.completed_topics,
		"totalCount": path.total_topics,
		**recommendations,
	}


@router.delete("/reset")
def reset(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	reset_learning_path(db, user.username)
	return {"message": "Learning path reset successfully"}
