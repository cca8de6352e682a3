from pydantic import BaseModel, Field


class ProblemDetail(BaseModel):
    """RFC 9457 problem-detail error body."""

    type: str = Field(default="about:blank", description="URI identifying the problem type")
    title: str
    status: int
    detail: str
    instance: str | None = Field(default=None, description="Request path that failed")
