import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("SECRET_KEY", "jlpt-tryout-test-secret")

import uuid
import pytest
from jose import jwt
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from jlpt_tryout.core.config import settings
from jlpt_tryout.core.constants import JLPTLevelEnum
from jlpt_tryout.core.database import build_engine
from jlpt_tryout.core.scoring_config import get_scoring_config
from jlpt_tryout.models.all_models import Base
from jlpt_tryout.models.question import Question
from jlpt_tryout.utils import deps as deps_utils
import main
from tests.helpers.attempts import CORRECT


def make_token(owner_id: str) -> str:
    return jwt.encode({"sub": owner_id}, settings.SECRET_KEY, algorithm=settings.TOKEN_ALGORITHM)

@pytest.fixture(scope="function")
def database_engine(tmp_path):
    # A file database so that threads in the race tests share one store.
    test_db_url = settings.TEST_DATABASE_URL or f"sqlite:///{tmp_path / 'test.db'}"
    engine = build_engine(test_db_url)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()

@pytest.fixture(scope="function")
def session_factory(database_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=database_engine)

@pytest.fixture(scope="function")
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.rollback()
        db.close()

@pytest.fixture(scope="function")
def client(db_session):
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()

@pytest.fixture
def owner_id():
    return f"user-{uuid.uuid4().hex[:8]}"

@pytest.fixture
def other_owner_id():
    return f"user-{uuid.uuid4().hex[:8]}"

@pytest.fixture
def auth_headers(owner_id):
    return {"Authorization": f"Bearer {make_token(owner_id)}"}

@pytest.fixture
def other_auth_headers(other_owner_id):
    return {"Authorization": f"Bearer {make_token(other_owner_id)}"}

@pytest.fixture
def seed_questions(db_session):
    """Fill the question bank for a level. Every seeded question's correct answer is CORRECT."""
    def _seed(level=JLPTLevelEnum.N5, sections=None, extra=0, skip=None, prefix="q"):
        skip = skip or {}
        level_config = get_scoring_config().level(level)
        questions = []
        for section_config in level_config.sections:
            if sections and section_config.section_type not in sections:
                continue
            for subsection in section_config.subsections:
                count = subsection.questions_count + extra - skip.get((section_config.section_type, subsection.number), 0)
                for number in range(1, count + 1):
                    questions.append(Question(
                        id=f"{prefix}-{level.value}-{section_config.section_type.value}-{subsection.number}-{number}",
                        level=level,
                        section_type=section_config.section_type,
                        mondai_number=subsection.number,
                        question_number=number,
                        correct_answer=CORRECT,
                        is_active=True,
                    ))
        db_session.add_all(questions)
        db_session.commit()
        return questions
    return _seed
