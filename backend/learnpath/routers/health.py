from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
	return {
		"status": "ok",
		"message": "Learning Path API is running",
		"timestamp": datetime.now(timezone.utc).isoformat(),
	}
