"""Database connectivity, session lifecycle, and persistence integration boundary."""

from __future__ import annotations

import logging
from collections.abc import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def _engine_kwargs(database_url: str) -> dict[str, object]:
	"""Build engine options for the configured backend."""
	engine_kwargs: dict[str, object] = {
		"pool_pre_ping": True,
	}

	if database_url.startswith("postgresql"):
		engine_kwargs.update(
			{
				"pool_recycle": 1800,
				"pool_size": 20,
				"max_overflow": 40,
				"pool_timeout": 30,
				"pool_use_lifo": True,
			}
		)
	elif database_url.startswith("sqlite"):
		engine_kwargs.update({"connect_args": {"check_same_thread": False}})
		if ":memory:" in database_url or database_url.rstrip("/") == "sqlite:":
			engine_kwargs["poolclass"] = StaticPool

	return engine_kwargs


class Database:
	"""Owns the engine and session factory for one application process.

	Constructed by the entry point, connected during startup and disposed on
	shutdown. Request handlers receive sessions through ``get_db``.
	"""

	def __init__(self, database_url: str) -> None:
		self.database_url = database_url
		self._engine: Engine | None = None
		self._session_factory: sessionmaker[Session] | None = None

	@property
	def engine(self) -> Engine:
		if self._engine is None:
			raise RuntimeError("Database is not connected; call connect() first.")
		return self._engine

	def connect(self) -> None:
		"""Create the engine and register metadata tables."""
		if self._engine is not None:
			return
		self._engine = create_engine(self.database_url, **_engine_kwargs(self.database_url))
		self._session_factory = sessionmaker(
			bind=self._engine,
			autoflush=False,
			autocommit=False,
			expire_on_commit=False,
		)
		self.create_all()
		logger.info("Database connected | backend=%s", self._engine.dialect.name)

	def create_all(self) -> None:
		from review_insights.models import report_model, user_session_model  # noqa: F401

		Base.metadata.create_all(bind=self.engine)

	def dispose(self) -> None:
		"""Release pooled connections."""
		if self._engine is None:
			return
		self._engine.dispose()
		self._engine = None
		self._session_factory = None
		logger.info("Database connections disposed")

	def session(self) -> Generator[Session, None, None]:
		"""Yield a database session for request-scoped dependency injection."""
		if self._session_factory is None:
			raise RuntimeError("Database is not connected; call connect() first.")
		session = self._session_factory()
		try:
			yield session
		finally:
			session.close()

	def check_connection(self) -> bool:
		"""Run a lightweight readiness query against the configured database."""
		try:
			with self.engine.connect() as connection:
				connection.execute(text("SELECT 1"))
			return True
		except (SQLAlchemyError, RuntimeError):
			return False
