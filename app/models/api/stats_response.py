from app.models.domain.open_event import CamelModel, OpenEventRecord


class StatsResponse(CamelModel):
    """Response for GET /stats"""

    total_opens: int
    unique_users: int
    opens: list[OpenEventRecord]


class ResetResponse(CamelModel):
    """Response for POST /reset"""

    success: bool
    message: str
    timestamp: str | None = None


class HealthResponse(CamelModel):
    """Response for GET /health"""

    status: str
    timestamp: str
