"""API v1 routes."""

from fastapi import APIRouter

from studentms.api.v1 import (
    admin_users,
    auth,
    dashboard,
    departments,
    health,
    profile,
    reports,
    sections,
    students,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(profile.router, prefix="/users/profile", tags=["profile"])
router.include_router(admin_users.router, prefix="/admin/users", tags=["admin"])
router.include_router(students.router, prefix="/students", tags=["students"])
router.include_router(departments.router, prefix="/departments", tags=["departments"])
router.include_router(sections.router, prefix="/sections", tags=["sections"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
router.include_router(reports.router, prefix="/reports", tags=["reports"])
