"""Validation result types for collection pre-flight checks."""

from enum import Enum

from pydantic import BaseModel, Field


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationIssue(BaseModel):
    """A single problem found in a collection."""

    severity: Severity
    category: str
    location: str
    message: str

    def __str__(self) -> str:
        return f"[{self.category}] {self.location}: {self.message}"


class ValidationResult(BaseModel):
    """Outcome of validating a collection."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def valid(self) -> bool:
        return not self.errors

    def add(self, severity: Severity, category: str, location: str, message: str) -> None:
        self.issues.append(
            ValidationIssue(
                severity=severity,
                category=category,
                location=location,
                message=message,
            )
        )
