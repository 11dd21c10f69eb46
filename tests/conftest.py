"""
Pytest fixtures for qbehaviour tests.
"""

from typing import Generator

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from qbehaviour.config import Settings
from qbehaviour.engines.capture import (
    InMemoryConfigLookup,
    InMemoryContentStore,
    ResponseCapture,
)
from qbehaviour.engines.grading import QueuedGradingService
from qbehaviour.kernel.models import (
    Base,
    FileRef,
    FileSubmissionQuestion,
    FreshUpload,
    PendingStep,
    QuestionAttempt,
    QuestionConfig,
)
from qbehaviour.orchestration import SubmissionStateMachine, create_cbm_behaviour
from qbehaviour.plugins.behaviours import ImmediateGradingBehaviour


USAGE_ID = 42
CONTEXT_ID = 7


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the environment and any .env file."""
    return Settings(_env_file=None, database_url="sqlite://")


@pytest.fixture
def question_config() -> QuestionConfig:
    return QuestionConfig(
        id=101,
        enable_file_submissions=True,
        enable_free_text_submissions=True,
        fts_max_num_fields=3,
        fts_auto_generate_filenames=True,
    )


@pytest.fixture
def question(question_config: QuestionConfig) -> FileSubmissionQuestion:
    return FileSubmissionQuestion(question_config)


@pytest.fixture
def content_store() -> InMemoryContentStore:
    store = InMemoryContentStore()
    store.register_usage(USAGE_ID, CONTEXT_ID)
    return store


@pytest.fixture
def config_lookup() -> InMemoryConfigLookup:
    return InMemoryConfigLookup()


@pytest.fixture
def capture(
    content_store: InMemoryContentStore,
    config_lookup: InMemoryConfigLookup,
    settings: Settings,
) -> ResponseCapture:
    return ResponseCapture(
        content_store=content_store,
        config_lookup=config_lookup,
        context_resolver=content_store.context_for_usage,
        settings=settings,
    )


@pytest.fixture
def grading() -> QueuedGradingService:
    return QueuedGradingService()


@pytest.fixture
def attempt() -> QuestionAttempt:
    return QuestionAttempt(usage_id=USAGE_ID)


@pytest.fixture
def base_behaviour(attempt, question, capture, grading) -> ImmediateGradingBehaviour:
    return ImmediateGradingBehaviour(attempt, question, capture, grading)


@pytest.fixture
def behaviour(attempt, question, capture, grading) -> SubmissionStateMachine:
    return create_cbm_behaviour(attempt, question, capture, grading)


@pytest.fixture
def solution_file() -> FileRef:
    return FileRef(filename="Solution.java", content_hash="a1b2c3", size=120)


@pytest.fixture
def upload(solution_file: FileRef) -> FreshUpload:
    return FreshUpload.of([solution_file])


def _submit_step(qt_data: dict, certainty=None) -> PendingStep:
    behaviour_vars = {"submit": 1}
    if certainty is not None:
        behaviour_vars["certainty"] = certainty
    return PendingStep(qt_data=qt_data, behaviour_vars=behaviour_vars)


def _grading_result_step(fraction) -> PendingStep:
    return PendingStep(behaviour_vars={"gradingresult": 1, "fraction": fraction})


@pytest.fixture
def submit_step():
    """Factory for pending 'submit' actions, optionally with a certainty."""
    return _submit_step


@pytest.fixture
def grading_result_step():
    """Factory for pending 'gradingresult' actions as delivered by the grader."""
    return _grading_result_step


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine: Engine) -> Generator[Session, None, None]:
    session = sessionmaker(db_engine, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
