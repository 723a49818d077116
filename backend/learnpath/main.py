import asyncio
import contextlib
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .cleanup import registry_sweeper, session_watcher
from .db import Base, engine, ensure_schema
from .errors import LearnPathError
from .logging_config import configure_logging
from .quiz_registry import QuizInstanceRegistry
from .settings import settings
from .routers import assessments, auth, export, health, recommendations

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Learning Path API")
app.add_middleware(
	CORSMiddleware,
	allow_origins=settings.cors_origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(assessments.router)
app.include_router(recommendations.router)
app.include_router(export.router)


@app.exception_handler(LearnPathError)
async def learnpath_error_handler(request: Request, exc: LearnPathError):
	return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
	return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.get("/info")
def root():
	return {"status": "ok", "gemini_configured": bool(settings.gemini_api_key)}


@app.on_event("startup")
async def startup_event():
	Base.metadata.create_all(bind=engine)
	# Apply lightweight dev migrations
	try:
		ensure_schema()
	except Exception as err:
		logger.warning("Schema migration skipped: %s", err)
	registry = QuizInstanceRegistry(settings.quiz_instance_ttl_seconds)
	app.state.quiz_registry = registry
	app.state.background_tasks = [
		asyncio.create_task(registry_sweeper(registry, settings.quiz_sweep_interval_seconds)),
		asyncio.create_task(session_watcher(settings.session_retention_days)),
	]


@app.on_event("shutdown")
async def shutdown_event():
	tasks = getattr(app.state, "background_tasks", [])
	for task in tasks:
		task.cancel()
	for task in tasks:
		with contextlib.suppress(asyncio.CancelledError):
			await task
