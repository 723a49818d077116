# =============================================================================
# Shared fixtures: in-memory database, app client, fake Gemini client
# =============================================================================

import os

# Must be set before learnpath.settings / learnpath.db are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["GEMINI_API_KEY"] = ""
os.environ["OPENROUTER_API_KEY"] = ""
os.environ["QUIZ_SWEEP_INTERVAL_SECONDS"] = "3600"
os.environ["LOG_LEVEL"] = "ERROR"

from datetime import datetime, timedelta, timezone

import pytest


class FakeClock:
	def __init__(self, start=None):
		self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

	def __call__(self):
		return self.now

	def advance(self, **kwargs):
		self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
	return FakeClock()


@pytest.fixture
def db_session():
	from learnpath.db import Base, SessionLocal, engine
	import learnpath.models  # noqa: F401 - register tables

	Base.metadata.drop_all(bind=engine)
	Base.metadata.create_all(bind=engine)
	db = SessionLocal()
	try:
		yield db
	finally:
		db.close()


@pytest.fixture
def app():
	from learnpath.db import Base, engine
	from learnpath.main import app

	Base.metadata.drop_all(bind=engine)
	yield app
	app.dependency_overrides.clear()


@pytest.fixture
def client(app):
	"""Unauthenticated client; startup hooks run inside the context."""
	from fastapi.testclient import TestClient

	with TestClient(app) as c:
		yield c


@pytest.fixture
def user_client(app, client):
	"""Client whose requests are made as user 'alice'."""
	from learnpath.routers.auth import User, get_current_user

	app.dependency_overrides[get_current_user] = lambda: User(username="alice")
	return client


@pytest.fixture
def fake_gemini(monkeypatch):
	"""Replace GeminiClient in a module with a stub returning canned output.

	Usage: fake_gemini("learnpath.quiz_generator", {"questions": [...]})
	A payload that is an Exception instance is raised from generate_json.
	"""
	from learnpath.errors import UpstreamGenerationError

	prompts = []

	def install(module_path, payload):
		class FakeGeminiClient:
			def __init__(self, *args, **kwargs):
				pass

			async def __aenter__(self):
				return self

			async def __aexit__(self, *exc_info):
				return None

			async def generate_json(self, prompt):
				prompts.append(prompt)
				if isinstance(payload, Exception):
					raise payload
				return payload

		monkeypatch.setattr(f"{module_path}.GeminiClient", FakeGeminiClient)
		return prompts

	install.error = UpstreamGenerationError
	return install
