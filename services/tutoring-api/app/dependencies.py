"""
Shared dependencies for the application.

Provides dependency injection functions used across routers; tests replace
them through ``app.dependency_overrides``.
"""

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import db
from app.notifier import EmailService, email_service
from app.repositories import (FlowiseEventRepository, IssueRepository, StudentRepository,
                              SummaryReportRepository)
from app.services import FlowiseService, IssueService, StudentService, SummaryReportService


def get_database() -> AsyncIOMotorDatabase:
    return db.get_database()


def get_email_service() -> EmailService:
    return email_service


def get_student_repository(
    database: AsyncIOMotorDatabase = Depends(get_database),
) -> StudentRepository:
    return StudentRepository(database)


def get_issue_repository(
    database: AsyncIOMotorDatabase = Depends(get_database),
) -> IssueRepository:
    return IssueRepository(database)


def get_summary_report_repository(
    database: AsyncIOMotorDatabase = Depends(get_database),
) -> SummaryReportRepository:
    return SummaryReportRepository(database)


def get_flowise_event_repository(
    database: AsyncIOMotorDatabase = Depends(get_database),
) -> FlowiseEventRepository:
    return FlowiseEventRepository(database)


def get_student_service(
    repository: StudentRepository = Depends(get_student_repository),
    notifier: EmailService = Depends(get_email_service),
) -> StudentService:
    return StudentService(repository, notifier)


def get_issue_service(
    repository: IssueRepository = Depends(get_issue_repository),
    notifier: EmailService = Depends(get_email_service),
) -> IssueService:
    return IssueService(repository, notifier)


def get_summary_report_service(
    repository: SummaryReportRepository = Depends(get_summary_report_repository),
    student_repository: StudentRepository = Depends(get_student_repository),
    notifier: EmailService = Depends(get_email_service),
) -> SummaryReportService:
    return SummaryReportService(repository, student_repository, notifier)


def get_flowise_service(
    repository: FlowiseEventRepository = Depends(get_flowise_event_repository),
    notifier: EmailService = Depends(get_email_service),
) -> FlowiseService:
    return FlowiseService(repository, notifier)
