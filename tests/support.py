"""Shared test cases: in-memory SQLite database and a FastAPI app wired to it."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from studentms.core.database import build_engine, get_db
from studentms.main import create_app
from studentms.models import Base, Department, Role, Section, Student, User
from studentms.schemas.academics import DepartmentCreate, SectionCreate, StudentCreate
from studentms.services.accounts import register_user
from studentms.services.departments import create_department, create_section
from studentms.services.students import create_student

API = "/api/v1"
DEFAULT_PASSWORD = "Passw0rd!"


class DatabaseTestCase(unittest.TestCase):
    """Fresh in-memory database per test."""

    def setUp(self) -> None:
        # StaticPool keeps one connection so every session sees the same in-memory DB.
        self.engine = build_engine("sqlite://", poolclass=StaticPool)
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False)
        self.db: Session = self.SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()

    def make_user(
        self,
        username: str = "alice",
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        role: Role = Role.FACULTY,
    ) -> User:
        return register_user(
            self.db,
            username,
            email or f"{username}@example.com",
            password,
            role.value,
            self_service=False,
        )

    def make_department(self, code: str = "CSE", name: str | None = None) -> Department:
        return create_department(
            self.db, DepartmentCreate(name=name or f"{code} Department", code=code)
        )

    def make_section(self, department: Department, name: str = "A", capacity: int = 60) -> Section:
        return create_section(
            self.db, SectionCreate(name=name, department=department.id, capacity=capacity)
        )

    def make_student(
        self,
        roll_number: str,
        section: Section,
        name: str | None = None,
        email: str | None = None,
    ) -> Student:
        return create_student(
            self.db,
            StudentCreate(
                name=name or f"Student {roll_number}",
                roll_number=roll_number,
                department=section.department_id,
                section=section.id,
                email=email or f"{roll_number.lower()}@college.edu",
                contact="9876543210",
            ),
        )


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus an app whose get_db dependency uses the test database."""

    def setUp(self) -> None:
        super().setUp()
        self.app = create_app()

        def override_get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        self.app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(self.app)

    def new_client(self) -> TestClient:
        """A client with its own cookie jar."""
        return TestClient(self.app)

    def login(self, client: TestClient, email: str, password: str = DEFAULT_PASSWORD):
        return client.post(f"{API}/auth/login", json={"email": email, "password": password})

    def logged_in_client(self, email: str, password: str = DEFAULT_PASSWORD) -> TestClient:
        client = self.new_client()
        response = self.login(client, email, password)
        self.assertEqual(response.status_code, 200, response.text)
        return client

    def assertError(self, response, status_code: int, code: str) -> None:
        self.assertEqual(response.status_code, status_code, response.text)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"]["code"], code)
