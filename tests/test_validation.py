"""Tests for form validation."""

from datetime import date, timedelta

import pytest

from hometrack.validation import FormValidator, ValidationIssue, ValidationResult


@pytest.fixture
def validator():
    return FormValidator()


class TestProjectForm:

    def test_valid_project(self, validator):
        result = validator.validate_project({"name": "Deck", "budget": 5000})
        assert result.is_valid
        assert result.issues == []

    def test_name_required(self, validator):
        result = validator.validate_project({"name": "   ", "budget": 5000})
        assert not result.is_valid
        assert result.error_for("name") == "Project name is required"

    def test_negative_budget_rejected(self, validator):
        result = validator.validate_project({"name": "Deck", "budget": -1})
        assert result.error_for("budget") == "Budget cannot be negative"

    def test_budget_required(self, validator):
        result = validator.validate_project({"name": "Deck"})
        assert result.error_for("budget") == "Budget is required"

    def test_non_numeric_budget(self, validator):
        result = validator.validate_project({"name": "Deck", "budget": "lots"})
        assert result.error_for("budget") == "Budget must be a number"

    def test_completion_before_start_is_warning(self, validator):
        """Inconsistent dates warn but do not block the save."""
        result = validator.validate_project({
            "name": "Deck",
            "budget": 100,
            "target_start_date": "2024-05-01",
            "estimated_completion_date": "2024-04-01",
        })
        assert result.is_valid
        assert [w.field for w in result.warnings] == ["estimated_completion_date"]

    def test_huge_amount_is_warning(self, validator):
        result = validator.validate_project({"name": "Deck", "budget": 50_000_000})
        assert result.is_valid
        assert result.warnings[0].issue_type == "suspicious_value"


class TestHistoryForm:

    def test_requires_name_and_date(self, validator):
        result = validator.validate_history_entry({})
        assert {i.field for i in result.errors} == {"project_name", "completion_date"}

    def test_valid_entry(self, validator):
        result = validator.validate_history_entry({
            "project_name": "Roof",
            "completion_date": date(2023, 5, 1),
            "actual_value": 5000,
        })
        assert result.is_valid

    def test_future_completion_is_warning(self, validator):
        result = validator.validate_history_entry({
            "project_name": "Roof",
            "completion_date": date.today() + timedelta(days=30),
        })
        assert result.is_valid
        assert result.warnings[0].issue_type == "future_date"


class TestContractorForm:

    @pytest.mark.parametrize("rating", [1, 3, 5, None, ""])
    def test_valid_ratings(self, validator, rating):
        assert validator.validate_contractor({"name": "Sam", "rating": rating}).is_valid

    @pytest.mark.parametrize("rating", [0, 6, "great"])
    def test_invalid_ratings(self, validator, rating):
        result = validator.validate_contractor({"name": "Sam", "rating": rating})
        assert result.error_for("rating") == "Rating must be between 1 and 5"

    def test_name_required(self, validator):
        assert not validator.validate_contractor({"name": ""}).is_valid


class TestPhotoForm:

    def test_url_required(self, validator):
        result = validator.validate_photo({"url": "  "})
        assert result.error_for("url") == "Photo URL is required"

    def test_web_address_is_valid(self, validator):
        assert validator.validate_photo({"url": "https://example.com/a.jpg"}).issues == []

    def test_odd_address_is_warning(self, validator):
        result = validator.validate_photo({"url": "example.com/a.jpg"})
        assert result.is_valid
        assert result.warnings[0].issue_type == "invalid_format"


class TestHomeForm:

    def test_requires_address_and_values(self, validator):
        result = validator.validate_home({"address": "", "purchase_price": None})
        assert {i.field for i in result.errors} == {"address", "purchase_price", "current_value"}


class TestSummary:

    def test_all_good(self, validator):
        assert validator.get_user_friendly_summary(ValidationResult(is_valid=True)) == "✅ Looks good."

    def test_lists_errors_and_fixes(self, validator):
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(field="name", issue_type="missing",
                                message="Project name is required", severity="error"),
                ValidationIssue(field="budget", issue_type="suspicious_value",
                                message="Budget seems unusually high", severity="warning",
                                suggested_fix="Please check for an extra zero"),
            ],
        )
        summary = validator.get_user_friendly_summary(result)
        assert "Project name is required" in summary
        assert "Please check for an extra zero" in summary
