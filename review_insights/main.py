"""Backend API application entrypoint for the Review Insights service."""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from review_insights.config import Settings, get_settings
from review_insights.database import Database
from review_insights.errors import ServiceError, UpstreamError
from review_insights.routes import analytics_routes, auth_routes, report_routes, review_routes, upload_routes
from review_insights.services.review_service import ReviewAcquirer

logger = logging.getLogger("review-insights")


def configure_logging(settings: Settings) -> logging.Logger:
	"""Configure application-wide structured logging."""
	logging.basicConfig(
		level=getattr(logging, settings.log_level.upper(), logging.INFO),
		format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
	)
	logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
	return logger


def _error_response(status_code: int, message: str) -> JSONResponse:
	return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _validation_message(exc: RequestValidationError) -> str:
	"""Describe the first validation problem, singling out unparseable JSON."""
	errors = exc.errors()
	if not errors:
		return "Invalid request"
	first = errors[0]
	if first.get("type") == "json_invalid":
		return "Invalid JSON in request body"
	location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
	message = first.get("msg", "Invalid value")
	return f"{location}: {message}" if location else message


def add_cors_middleware(app: FastAPI, app_settings: Settings) -> None:
	"""Attach CORS middleware for frontend interaction."""
	app.add_middleware(
		CORSMiddleware,
		allow_origins=app_settings.allowed_cors_origins,
		allow_credentials=True,
		allow_methods=["*"],
		allow_headers=["*"],
	)


def add_request_context_middleware(app: FastAPI) -> None:
	"""Attach request context middleware for tracing and observability."""

	@app.middleware("http")
	async def inject_request_context(request: Request, call_next: Callable):
		request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
		request.state.request_id = request_id
		start = time.perf_counter()

		response = await call_next(request)

		elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
		response.headers["X-Request-ID"] = request_id
		response.headers["X-Response-Time-ms"] = str(elapsed_ms)

		logger.info(
			"request_complete | request_id=%s | method=%s | path=%s | status=%s | latency_ms=%s",
			request_id,
			request.method,
			request.url.path,
			response.status_code,
			elapsed_ms,
		)
		return response


def register_exception_handlers(app: FastAPI) -> None:
	"""Register global exception handlers that render the error envelope."""

	@app.exception_handler(ServiceError)
	async def service_exception_handler(request: Request, exc: ServiceError):
		request_id = getattr(request.state, "request_id", "unknown")
		if isinstance(exc, UpstreamError):
			logger.error("upstream_failure | request_id=%s | %s", request_id, exc.message)
			return _error_response(exc.status_code, f"Failed to analyze code: {exc.message}")
		logger.info("service_error | request_id=%s | status=%s | %s", request_id, exc.status_code, exc.message)
		return _error_response(exc.status_code, exc.message)

	@app.exception_handler(StarletteHTTPException)
	async def http_exception_handler(request: Request, exc: StarletteHTTPException):
		return _error_response(exc.status_code, str(exc.detail))

	@app.exception_handler(RequestValidationError)
	async def validation_exception_handler(request: Request, exc: RequestValidationError):
		return _error_response(status.HTTP_400_BAD_REQUEST, _validation_message(exc))

	@app.exception_handler(Exception)
	async def unhandled_exception_handler(request: Request, exc: Exception):
		request_id = getattr(request.state, "request_id", "unknown")
		logger.exception("unhandled_exception | request_id=%s", request_id)
		return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred.")


def register_routes(app: FastAPI, app_settings: Settings) -> None:
	"""Register all feature routers with a shared API prefix."""
	app.include_router(review_routes, prefix=app_settings.api_prefix)
	app.include_router(report_routes, prefix=app_settings.api_prefix)
	app.include_router(analytics_routes, prefix=app_settings.api_prefix)
	app.include_router(upload_routes, prefix=app_settings.api_prefix)
	app.include_router(auth_routes, prefix=app_settings.api_prefix)


def create_app(
	settings: Optional[Settings] = None,
	database: Optional[Database] = None,
	acquirer: Optional[ReviewAcquirer] = None,
) -> FastAPI:
	"""Create and configure FastAPI application instance.

	``database`` and ``acquirer`` may be injected; otherwise the database is
	built from settings and the acquirer on the first review request.
	"""
	app_settings = settings or get_settings()
	configure_logging(app_settings)
	app_database = database or Database(app_settings.database_url)

	@asynccontextmanager
	async def lifespan(app: FastAPI):
		"""Manage startup and shutdown lifecycle events."""
		logger.info("Starting server | app=%s | version=%s", app_settings.app_name, app_settings.app_version)
		app_database.connect()
		app.state.started_at = time.time()
		yield
		app_database.dispose()
		logger.info("Shutting down server | app=%s", app_settings.app_name)

	app = FastAPI(
		title=app_settings.app_name,
		version=app_settings.app_version,
		description=app_settings.app_description,
		lifespan=lifespan,
		docs_url="/docs",
		redoc_url="/redoc",
		openapi_url=f"{app_settings.api_prefix}/openapi.json",
	)
	app.state.settings = app_settings
	app.state.database = app_database
	app.state.review_acquirer = acquirer
	app.state.instance_id = str(uuid.uuid4())

	add_cors_middleware(app, app_settings)
	add_request_context_middleware(app)
	register_exception_handlers(app)
	register_routes(app, app_settings)

	@app.get("/", tags=["system"], summary="Root endpoint")
	def root() -> dict[str, str]:
		return {
			"service": app_settings.app_name,
			"version": app_settings.app_version,
			"status": "running",
		}

	@app.get("/health", tags=["system"], summary="Service health check")
	def health_check() -> dict[str, object]:
		"""Return runtime and dependency health status."""
		db_ok = app_database.check_connection()
		uptime_seconds = int(time.time() - app.state.started_at)

		return {
			"status": "healthy" if db_ok else "degraded",
			"code": "ok" if db_ok else "db_unreachable",
			"environment": app_settings.environment,
			"version": app_settings.app_version,
			"instance_id": app.state.instance_id,
			"database": {"connected": db_ok},
			"uptime_seconds": uptime_seconds,
		}

	return app


app = create_app()
