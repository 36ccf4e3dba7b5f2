import time

from prometheus_client import Counter, Histogram

from app.models import DeliveryStatus, NotificationType, SubmissionSource

submissions_total = Counter(
    "tutoring_submissions_total",
    "Total number of accepted submissions",
    ["kind", "source"],
)

duplicate_conflicts_total = Counter(
    "tutoring_duplicate_conflicts_total",
    "Total number of student submissions rejected as duplicates",
    ["code"],
)

emails_sent_total = Counter(
    "tutoring_emails_sent_total",
    "Total number of emails handed to the email channel",
    ["notification_type", "status"],
)

email_delivery_duration_seconds = Histogram(
    "tutoring_email_delivery_duration_seconds",
    "Email delivery duration in seconds",
    ["notification_type"],
)


class MetricsTracker:
    """Helper class for tracking metrics with timing."""

    def __init__(self, notification_type: NotificationType):
        self.notification_type = notification_type
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time:
            duration = time.time() - self.start_time
            email_delivery_duration_seconds.labels(
                notification_type=self.notification_type.value
            ).observe(duration)


def record_submission(kind: str, source: SubmissionSource) -> None:
    """Record an accepted submission."""
    submissions_total.labels(kind=kind, source=source.value).inc()


def record_duplicate_conflict(code: str) -> None:
    duplicate_conflicts_total.labels(code=code).inc()


def record_email_sent(notification_type: NotificationType, status: DeliveryStatus) -> None:
    """Record email sent metric."""
    emails_sent_total.labels(
        notification_type=notification_type.value, status=status.value
    ).inc()
