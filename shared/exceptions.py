"""RFC 9457 Problem Details exception hierarchy.

All API errors extend ProblemDetailError and are converted to
application/problem+json responses by the exception handler middleware.
The timer and schedule domain itself raises none of these.
"""

PROBLEM_BASE_URI = "https://api.fasting-cycle.local/problems"


class ProblemDetailError(Exception):
    def __init__(
        self,
        type_uri: str,
        title: str,
        status: int,
        detail: str,
        violations: list[dict] | None = None,
    ):
        self.type_uri = type_uri
        self.title = title
        self.status = status
        self.detail = detail
        self.violations = violations
        super().__init__(detail)


class NotFoundError(ProblemDetailError):
    def __init__(self, detail: str, title: str = "Not Found", slug: str = "not-found"):
        super().__init__(
            type_uri=f"{PROBLEM_BASE_URI}/{slug}",
            title=title,
            status=404,
            detail=detail,
        )


class ScheduleNotFoundError(NotFoundError):
    def __init__(self, day: str):
        super().__init__(
            detail=f"The active pattern has no schedule for '{day}'.",
            title="Schedule Not Found",
            slug="schedule-not-found",
        )


class UnknownPresetError(NotFoundError):
    def __init__(self, key: str, allowed: list[str]):
        super().__init__(
            detail=f"Preset '{key}' does not exist. Must be one of: {', '.join(allowed)}",
            title="Unknown Preset",
            slug="unknown-preset",
        )


class UnsupportedDayError(ProblemDetailError):
    def __init__(self, day: str):
        super().__init__(
            type_uri=f"{PROBLEM_BASE_URI}/unsupported-day",
            title="Unsupported Day",
            status=422,
            detail=(
                f"Day '{day}' is not a day of the week. "
                "Use a name (monday), a short name (mon) or 0-6 starting at sunday."
            ),
        )


class TimerRunningError(ProblemDetailError):
    def __init__(self):
        super().__init__(
            type_uri=f"{PROBLEM_BASE_URI}/timer-running",
            title="Timer Running",
            status=409,
            detail="Fasting hours cannot be changed while the timer is running. Stop it first.",
        )
