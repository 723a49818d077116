from __future__ import annotations
from datetime import datetime
from sqlalchemy import Boolean, Column, String, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from .db import Base


class AuthUser(Base):
	__tablename__ = "auth_users"
	# Primary key is username
	username = Column(String(128), primary_key=True, index=True)
	password_hash = Column(String(256), nullable=False)
	email = Column(String(256), nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class AuthSession(Base):
	__tablename__ = "auth_sessions"
	# jti of the issued access token
	session_id = Column(String(64), primary_key=True)
	username = Column(String(128), nullable=False, index=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	last_activity_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Assessment(Base):
	__tablename__ = "assessments"
	id = Column(String(32), primary_key=True)
	username = Column(String(128), nullable=False, index=True)
	subject = Column(String(64), nullable=False)
	score = Column(Integer, nullable=False)
	total_questions = Column(Integer, nullable=False)
	correct_answers = Column(Integer, nullable=False)
	time_taken = Column(Integer, default=0, nullable=False)  # seconds
	skill_level = Column(String(16), nullable=False)
	# Graded answers as submitted: [{questionId, selectedOption, isCorrect}]
	answers_json = Column(Text, nullable=False, default="[]")
	# Per-question review shown after submission
	results_json = Column(Text, nullable=False, default="[]")
	completed_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)


class LearningPath(Base):
	__tablename__ = "learning_paths"
	# One roadmap per user
	username = Column(String(128), primary_key=True)
	overview = Column(Text, nullable=True)
	estimated_duration = Column(String(64), nullable=True)
	ai_recommendations = Column(Text, nullable=True)  # JSON string snapshot of the roadmap
	is_ai_generated = Column(Boolean, default=False, nullable=False)
	total_topics = Column(Integer, default=0, nullable=False)
	completed_topics = Column(Integer, default=0, nullable=False)
	progress_percentage = Column(Integer, default=0, nullable=False)
	generated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	last_updated = Column(DateTime, default=datetime.utcnow, nullable=False)

	topics = relationship(
		"LearningPathTopic",
		order_by="LearningPathTopic.position",
		cascade="all, delete-orphan",
		back_populates="path",
	)


class LearningPathTopic(Base):
	__tablename__ = "learning_path_topics"
	id = Column(Integer, primary_key=True, autoincrement=True)
	username = Column(String(128), ForeignKey("learning_paths.username", ondelete="CASCADE"), nullable=False, index=True)
	position = Column(Integer, nullable=False)
	topic_key = Column(String(64), nullable=False)
	title = Column(String(256), nullable=False)
	description = Column(Text, nullable=True)
	subject = Column(String(64), nullable=True)
	difficulty = Column(String(16), nullable=True)
	estimated_time = Column(String(64), nullable=True)
	order = Column(Integer, default=0, nullable=False)
	prerequisites_json = Column(Text, nullable=False, default="[]")
	resources_json = Column(Text, nullable=False, default="[]")
	status = Column(String(16), default="not_started", nullable=False)
	completed_at = Column(DateTime, nullable=True)

	path = relationship("LearningPath", back_populates="topics")
