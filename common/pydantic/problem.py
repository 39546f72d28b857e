from typing import Dict, List, Optional

from fastapi import HTTPException
from pydantic import BaseModel


class ProblemDetails(BaseModel):
    """RFC 7807 error body returned by every failing endpoint."""
    type: str = "about:blank"
    title: str
    status: int
    detail: Optional[str] = None
    code: Optional[str] = None
    errors: Optional[Dict[str, List[str]]] = None


class ApiProblem(HTTPException):
    """HTTPException that carries enough data to render a ProblemDetails body."""

    def __init__(
        self,
        status_code: int,
        title: str,
        detail: Optional[str] = None,
        code: Optional[str] = None,
        errors: Optional[Dict[str, List[str]]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.title = title
        self.code = code
        self.errors = errors

    def to_problem(self) -> ProblemDetails:
        return ProblemDetails(
            title=self.title,
            status=self.status_code,
            detail=self.detail,
            code=self.code,
            errors=self.errors,
        )
