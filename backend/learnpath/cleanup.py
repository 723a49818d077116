from __future__ import annotations
import asyncio
import logging
from datetime import datetime, timedelta
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .db import SessionLocal
from .models import AuthSession
from .quiz_registry import QuizInstanceRegistry

logger = logging.getLogger(__name__)


def purge_stale_sessions(db: Session, days: int = 7) -> int:
	threshold = datetime.utcnow() - timedelta(days=days)
	res = db.execute(delete(AuthSession).where(AuthSession.last_activity_at < threshold))
	db.commit()
	return res.rowcount or 0


async def registry_sweeper(registry: QuizInstanceRegistry, interval_seconds: int) -> None:
	while True:
		await asyncio.sleep(interval_seconds)
		try:
			registry.sweep_expired()
		except Exception as err:
			logger.warning("Quiz instance sweep failed: %s", err)


async def session_watcher(days: int) -> None:
	# Run once at startup, then daily
	while True:
		db = SessionLocal()
		try:
			removed = purge_stale_sessions(db, days)
			if removed:
				logger.info("Purged %d idle auth session(s)", removed)
		except SQLAlchemyError as err:
			db.rollback()
			logger.warning("Session cleanup failed: %s", err)
		finally:
			db.close()
		await asyncio.sleep(24 * 60 * 60)
