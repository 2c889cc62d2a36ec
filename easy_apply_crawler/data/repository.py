"""Persistence for extracted listings, their submission status and the step log"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, select, update
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from easy_apply_crawler.config import DATABASE_URL
from easy_apply_crawler.data.models import ApplicationStepModel, Base, ListingModel
from easy_apply_crawler.data.records import ProcessingStatus, StepAuditEntry


class RecordRepository(ABC):
    """Listing storage with idempotent upsert and an at-most-once submitted flag"""

    @abstractmethod
    def upsert_listing(self, record):
        """Store ``record`` unless a listing with the same target_url exists."""

    def upsert_listings(self, records):
        """Upsert a batch, returning how many rows were new"""
        return sum(1 for record in records if self.upsert_listing(record))

    @abstractmethod
    def select_eligible_unsubmitted(self):
        """Return target URLs that are eligible and not yet submitted."""

    @abstractmethod
    def mark_submitted(self, target_url, timestamp):
        """Flip submitted to True once. Returns True if this call changed the row."""


class AuditSink(ABC):
    """Write-only sink for step audit entries"""

    @abstractmethod
    def append_step(self, entry):
        """Append one StepAuditEntry."""


def _prepare_sqlite_path(database_url):
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return
    if not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def create_sqlalchemy_engine(database_url=DATABASE_URL):
    """Create SQLAlchemy engine with sensible defaults for SQLite."""
    _prepare_sqlite_path(database_url)
    engine_kwargs = {}
    connect_args = {}

    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        if database_url.endswith(":memory:"):
            engine_kwargs["poolclass"] = StaticPool

    return create_engine(database_url, connect_args=connect_args, **engine_kwargs)


class SqlRepository(RecordRepository, AuditSink):
    """SQLAlchemy-backed listing repository and step log"""

    def __init__(self, database_url=DATABASE_URL):
        self._engine = create_sqlalchemy_engine(database_url)
        self._session_factory = sessionmaker(
            bind=self._engine, autoflush=False, expire_on_commit=False
        )

    def create_schema(self):
        Base.metadata.create_all(bind=self._engine)

    @contextmanager
    def session_scope(self):
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def upsert_listing(self, record):
        link = (record.target_url or "").strip()
        if not link:
            return False

        with self.session_scope() as session:
            existing = session.scalars(
                select(ListingModel.id).where(ListingModel.link == link)
            ).first()
            if existing is not None:
                return False
            session.add(
                ListingModel(
                    title=record.title,
                    organization=record.organization,
                    location=record.location,
                    link=link,
                    eligible=True,
                    submitted=False,
                )
            )
        return True

    def select_eligible_unsubmitted(self):
        stmt = (
            select(ListingModel.link)
            .where(ListingModel.eligible.is_(True))
            .where(ListingModel.submitted.is_(False))
            .where(ListingModel.link != "")
            .distinct()
            .order_by(ListingModel.link)
        )
        with self.session_scope() as session:
            return list(session.scalars(stmt).all())

    def mark_submitted(self, target_url, timestamp):
        if not target_url or not target_url.strip():
            return False

        stmt = (
            update(ListingModel)
            .where(ListingModel.link == target_url)
            .where(ListingModel.submitted.is_(False))
            .values(submitted=True, submitted_at=timestamp)
        )
        with self.session_scope() as session:
            result = session.execute(stmt)
            return result.rowcount == 1

    def get_status(self, target_url):
        stmt = select(ListingModel).where(ListingModel.link == target_url)
        with self.session_scope() as session:
            model = session.scalars(stmt).first()
            if model is None:
                return None
            return ProcessingStatus(
                eligible=bool(model.eligible),
                submitted=bool(model.submitted),
                submitted_at=model.submitted_at,
            )

    def count_listings(self, target_url=None):
        stmt = select(ListingModel.id)
        if target_url is not None:
            stmt = stmt.where(ListingModel.link == target_url)
        with self.session_scope() as session:
            return len(session.scalars(stmt).all())

    def append_step(self, entry):
        with self.session_scope() as session:
            session.add(
                ApplicationStepModel(
                    link=entry.target_url,
                    step=entry.step_name,
                    success=entry.success,
                    detail=entry.detail,
                    html_path=entry.html_path,
                    screenshot_path=entry.screenshot_path,
                    created_at=entry.created_at,
                )
            )

    def list_steps(self, target_url):
        stmt = (
            select(ApplicationStepModel)
            .where(ApplicationStepModel.link == target_url)
            .order_by(ApplicationStepModel.created_at, ApplicationStepModel.id)
        )
        with self.session_scope() as session:
            return [
                StepAuditEntry(
                    target_url=model.link,
                    step_name=model.step,
                    success=bool(model.success),
                    detail=model.detail,
                    html_path=model.html_path,
                    screenshot_path=model.screenshot_path,
                    created_at=model.created_at,
                )
                for model in session.scalars(stmt).all()
            ]
