"""
Two-Stage Form Validation

Forms are checked before anything is sent to storage.

STAGE 1 - REQUIRED FIELDS:
- Presence of required values
- Non-negative money
- Rating range
A form with stage 1 errors cannot be saved.

STAGE 2 - CONSISTENCY:
- Dates in a sensible order
- Values that look like typos
These are warnings; the user may save anyway.

Validation NEVER silently fixes values. It reports them.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single problem found in a form."""

    field: str
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'inconsistent')"
    )
    message: str
    severity: str = Field(..., pattern="^(error|warning)$")
    suggested_fix: Optional[str] = None


class ValidationResult(BaseModel):
    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    def error_for(self, field: str) -> Optional[str]:
        for issue in self.errors:
            if issue.field == field:
                return issue.message
        return None


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


class FormValidator:
    """Validates the raw values of the home, project, history and contractor forms."""

    MAX_REASONABLE_AMOUNT = 10_000_000

    def _money(
        self,
        data: dict[str, Any],
        field: str,
        label: str,
        issues: list[ValidationIssue],
        required: bool = False,
    ) -> None:
        value = data.get(field)
        if _blank(value):
            if required:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="missing",
                    message=f"{label} is required",
                    severity="error",
                ))
            return
        try:
            amount = float(value)
        except (TypeError, ValueError):
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message=f"{label} must be a number",
                severity="error",
            ))
            return
        if amount < 0:
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message=f"{label} cannot be negative",
                severity="error",
            ))
        elif amount > self.MAX_REASONABLE_AMOUNT:
            issues.append(ValidationIssue(
                field=field,
                issue_type="suspicious_value",
                message=f"{label} seems unusually high",
                severity="warning",
                suggested_fix="Please check for an extra zero",
            ))

    @staticmethod
    def _result(issues: list[ValidationIssue]) -> ValidationResult:
        return ValidationResult(
            is_valid=not any(i.severity == "error" for i in issues),
            issues=issues,
        )

    def validate_project(self, data: dict[str, Any]) -> ValidationResult:
        issues: list[ValidationIssue] = []

        # Stage 1
        if _blank(data.get("name")):
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Project name is required",
                severity="error",
            ))
        self._money(data, "budget", "Budget", issues, required=True)
        self._money(data, "projected_value", "Projected value", issues)
        self._money(data, "actual_value", "Actual value", issues)

        # Stage 2
        start = _as_date(data.get("target_start_date"))
        finish = _as_date(data.get("estimated_completion_date"))
        if start and finish and finish < start:
            issues.append(ValidationIssue(
                field="estimated_completion_date",
                issue_type="inconsistent",
                message="Estimated completion is before the target start date",
                severity="warning",
                suggested_fix="Please verify both dates",
            ))

        return self._result(issues)

    def validate_history_entry(self, data: dict[str, Any]) -> ValidationResult:
        issues: list[ValidationIssue] = []

        if _blank(data.get("project_name")):
            issues.append(ValidationIssue(
                field="project_name",
                issue_type="missing",
                message="Project name is required",
                severity="error",
            ))
        completed = _as_date(data.get("completion_date"))
        if completed is None:
            issues.append(ValidationIssue(
                field="completion_date",
                issue_type="missing",
                message="Completion date is required",
                severity="error",
            ))
        elif completed > date.today():
            issues.append(ValidationIssue(
                field="completion_date",
                issue_type="future_date",
                message="Completion date is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))
        self._money(data, "projected_value", "Projected value", issues)
        self._money(data, "actual_value", "Actual value", issues)

        return self._result(issues)

    def validate_contractor(self, data: dict[str, Any]) -> ValidationResult:
        issues: list[ValidationIssue] = []

        if _blank(data.get("name")):
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Contractor name is required",
                severity="error",
            ))
        rating = data.get("rating")
        if not _blank(rating):
            try:
                valid = 1 <= int(rating) <= 5
            except (TypeError, ValueError):
                valid = False
            if not valid:
                issues.append(ValidationIssue(
                    field="rating",
                    issue_type="invalid_value",
                    message="Rating must be between 1 and 5",
                    severity="error",
                ))

        return self._result(issues)

    def validate_photo(self, data: dict[str, Any]) -> ValidationResult:
        issues: list[ValidationIssue] = []

        url = data.get("url")
        if _blank(url):
            issues.append(ValidationIssue(
                field="url",
                issue_type="missing",
                message="Photo URL is required",
                severity="error",
            ))
        elif not str(url).strip().lower().startswith(("http://", "https://")):
            issues.append(ValidationIssue(
                field="url",
                issue_type="invalid_format",
                message="Photo URL does not look like a web address",
                severity="warning",
                suggested_fix="Paste the full link, starting with https://",
            ))

        return self._result(issues)

    def validate_home(self, data: dict[str, Any]) -> ValidationResult:
        issues: list[ValidationIssue] = []

        if _blank(data.get("address")):
            issues.append(ValidationIssue(
                field="address",
                issue_type="missing",
                message="Address is required",
                severity="error",
            ))
        self._money(data, "purchase_price", "Purchase price", issues, required=True)
        self._money(data, "current_value", "Current value", issues, required=True)

        return self._result(issues)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """What we show above the form when something needs attention."""
        if result.is_valid and not result.warnings:
            return "✅ Looks good."

        lines = []
        if result.errors:
            lines.append("❌ Please fix the following before saving:")
            for issue in result.errors:
                lines.append(f"   • {issue.message}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please double-check:")
            for issue in result.warnings:
                lines.append(f"   • {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"     💡 {issue.suggested_fix}")

        return "\n".join(lines)
