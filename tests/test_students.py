"""Tests for student records: validation, placement checks, listing and search."""

import unittest

from studentms.core.errors import DuplicateEntryError, NotFoundError, ValidationFailedError
from studentms.models import Student
from studentms.schemas.academics import StudentCreate, StudentUpdate
from studentms.services.students import (
    create_student,
    delete_student,
    list_students,
    search_students,
    update_student,
)
from tests.support import DatabaseTestCase


class StudentTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.cse = self.make_department("CSE", "Computer Science")
        self.ece = self.make_department("ECE", "Electronics")
        self.cse_a = self.make_section(self.cse, "A")
        self.cse_b = self.make_section(self.cse, "B")
        self.ece_a = self.make_section(self.ece, "A")

    def _body(self, **overrides) -> StudentCreate:
        fields = {
            "name": "Asha Rao",
            "roll_number": "cs001",
            "department": self.cse.id,
            "section": self.cse_a.id,
            "email": "Asha.Rao@College.edu",
            "contact": "9876543210",
        }
        fields.update(overrides)
        return StudentCreate(**fields)


class TestCreateStudent(StudentTestCase):
    def test_normalizes_roll_number_and_email(self) -> None:
        student = create_student(self.db, self._body())
        self.assertEqual(student.roll_number, "CS001")
        self.assertEqual(student.email, "asha.rao@college.edu")
        self.assertEqual(student.department.code, "CSE")
        self.assertEqual(student.section.name, "A")

    def test_all_fields_required(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            create_student(self.db, self._body(contact=" "))
        self.assertEqual(ctx.exception.code, "MISSING_REQUIRED_FIELDS")

    def test_contact_and_email_format(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            create_student(self.db, self._body(contact="12345", email="not-an-email"))
        self.assertEqual(
            [e["field"] for e in ctx.exception.details], ["email", "contact"]
        )

    def test_duplicate_roll_number_ignores_case(self) -> None:
        create_student(self.db, self._body())
        with self.assertRaises(DuplicateEntryError) as ctx:
            create_student(self.db, self._body(roll_number="CS001", email="other@college.edu"))
        self.assertEqual(ctx.exception.code, "DUPLICATE_ROLL_NUMBER")

    def test_duplicate_email_ignores_case(self) -> None:
        create_student(self.db, self._body())
        with self.assertRaises(DuplicateEntryError) as ctx:
            create_student(self.db, self._body(roll_number="CS002", email="ASHA.RAO@college.edu"))
        self.assertEqual(ctx.exception.code, "DUPLICATE_EMAIL")

    def test_unknown_department_and_section(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            create_student(self.db, self._body(department="missing"))
        self.assertEqual(ctx.exception.code, "DEPARTMENT_NOT_FOUND")
        with self.assertRaises(ValidationFailedError) as ctx:
            create_student(self.db, self._body(section="missing"))
        self.assertEqual(ctx.exception.code, "SECTION_NOT_FOUND")

    def test_section_of_another_department(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            create_student(self.db, self._body(section=self.ece_a.id))
        self.assertEqual(ctx.exception.code, "SECTION_DEPARTMENT_MISMATCH")
        self.assertEqual(self.db.query(Student).count(), 0)


class TestUpdateStudent(StudentTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.student = create_student(self.db, self._body())

    def test_partial_update(self) -> None:
        updated = update_student(
            self.db, self.student.id, StudentUpdate(name="Asha R", contact="9123456780")
        )
        self.assertEqual((updated.name, updated.contact), ("Asha R", "9123456780"))
        self.assertEqual(updated.roll_number, "CS001")

    def test_own_roll_number_is_not_a_duplicate(self) -> None:
        updated = update_student(self.db, self.student.id, StudentUpdate(roll_number="cs001"))
        self.assertEqual(updated.roll_number, "CS001")

    def test_taken_email(self) -> None:
        self.make_student("CS002", self.cse_a, email="taken@college.edu")
        with self.assertRaises(DuplicateEntryError) as ctx:
            update_student(self.db, self.student.id, StudentUpdate(email="Taken@college.edu"))
        self.assertEqual(ctx.exception.code, "DUPLICATE_EMAIL")

    def test_move_section_within_department(self) -> None:
        updated = update_student(self.db, self.student.id, StudentUpdate(section=self.cse_b.id))
        self.assertEqual(updated.section.name, "B")

    def test_department_change_must_match_section(self) -> None:
        # Changing only the department would leave the student in a CSE section.
        with self.assertRaises(ValidationFailedError) as ctx:
            update_student(self.db, self.student.id, StudentUpdate(department=self.ece.id))
        self.assertEqual(ctx.exception.code, "SECTION_DEPARTMENT_MISMATCH")

        updated = update_student(
            self.db,
            self.student.id,
            StudentUpdate(department=self.ece.id, section=self.ece_a.id),
        )
        self.assertEqual(updated.department.code, "ECE")

    def test_unknown_student(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            update_student(self.db, "missing", StudentUpdate(name="x"))
        self.assertEqual(ctx.exception.code, "STUDENT_NOT_FOUND")

    def test_delete(self) -> None:
        delete_student(self.db, self.student.id)
        with self.assertRaises(NotFoundError):
            delete_student(self.db, self.student.id)


class TestListAndSearch(StudentTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.make_student("CS001", self.cse_a, name="Asha Rao")
        self.make_student("CS002", self.cse_b, name="Ravi Kumar")
        self.make_student("EC001", self.ece_a, name="Meena Iyer")

    def test_filter_by_department_and_section(self) -> None:
        self.assertEqual(list_students(self.db, department_id=self.cse.id).total, 2)
        result = list_students(self.db, department_id=self.cse.id, section_id=self.cse_b.id)
        self.assertEqual([s.roll_number for s in result.students], ["CS002"])

    def test_pagination(self) -> None:
        result = list_students(self.db, page=2, limit=2)
        self.assertEqual((result.total, result.pages, len(result.students)), (3, 2, 1))

    def test_search_name_or_roll_number(self) -> None:
        self.assertEqual([s.name for s in search_students(self.db, "ravi").students], ["Ravi Kumar"])
        result = search_students(self.db, "cs00")
        self.assertEqual(sorted(s.roll_number for s in result.students), ["CS001", "CS002"])

    def test_search_wildcards_are_literal(self) -> None:
        self.assertEqual(search_students(self.db, "%").total, 0)

    def test_search_requires_query(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            search_students(self.db, "  ")
        self.assertEqual(ctx.exception.code, "MISSING_SEARCH_QUERY")


if __name__ == "__main__":
    unittest.main()
