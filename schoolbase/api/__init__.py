"""API router aggregator."""

from fastapi import APIRouter

from schoolbase.api import (
    academic,
    admin,
    attendance,
    auth,
    calendar,
    class_routines,
    dashboard,
    document_templates,
    financial,
    inventory,
    library,
    meetings,
    notifications,
    portals,
    schools,
    settings,
    student_imports,
    students,
    teachers,
    transport,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(schools.router, prefix="/schools", tags=["Schools"])
api_router.include_router(admin.router, tags=["Administration"])
api_router.include_router(
    student_imports.router, prefix="/students/import", tags=["Student Import"]
)
api_router.include_router(students.router, prefix="/students", tags=["Students"])
api_router.include_router(teachers.router, prefix="/teachers", tags=["Teachers"])
api_router.include_router(financial.router, prefix="/financial", tags=["Financial"])
api_router.include_router(library.router, prefix="/library", tags=["Library"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["Inventory"])
api_router.include_router(transport.router, prefix="/transport", tags=["Transport"])
api_router.include_router(academic.router, prefix="/academic", tags=["Academic"])
api_router.include_router(attendance.router, prefix="/attendance", tags=["Attendance"])
api_router.include_router(class_routines.router, prefix="/class-routines", tags=["Class Routines"])
api_router.include_router(calendar.router, prefix="/calendar", tags=["Calendar"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(meetings.router, prefix="/meetings", tags=["Meetings"])
api_router.include_router(
    document_templates.router, prefix="/document-templates", tags=["Document Templates"]
)
api_router.include_router(settings.router, prefix="/school/settings", tags=["School Settings"])
# Older clients still call the settings endpoints under this path
api_router.include_router(
    settings.router, prefix="/supabase/school/settings", include_in_schema=False
)
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(portals.student_router, prefix="/student-portal", tags=["Student Portal"])
api_router.include_router(portals.parent_router, prefix="/parent-portal", tags=["Parent Portal"])
api_router.include_router(portals.teacher_router, prefix="/teacher-portal", tags=["Teacher Portal"])
