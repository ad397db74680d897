"""Tests for the write-payload generators."""

import re

import pytest

from litmos_client import (
    ValidationError,
    generate_module_result_object,
    generate_user_object,
)

USER = {
    "UserName": "a@b.com",
    "FirstName": "A",
    "LastName": "B",
    "DisableMessages": False,
}


class TestGenerateUserObject:

    def test_field_order(self):
        user = generate_user_object({**USER, "City": "Oslo", "Skype": "ab"})
        assert list(user) == [
            "Id",
            "UserName",
            "FirstName",
            "LastName",
            "FullName",
            "Email",
            "AccessLevel",
            "DisableMessages",
            "Active",
            "Skype",
            "LastLogin",
            "LoginKey",
            "IsCustomUsername",
            "SkipFirstLogin",
            "TimeZone",
            "City",
        ]

    def test_defaults(self):
        user = generate_user_object(USER)
        assert user["Id"] == ""
        assert user["AccessLevel"] == "Learner"
        assert user["Active"] == "true"
        assert user["IsCustomUsername"] == "false"
        assert user["SkipFirstLogin"] == "false"
        assert user["TimeZone"] == ""

    def test_email_defaults_to_username(self):
        assert generate_user_object(USER)["Email"] == "a@b.com"

    def test_explicit_email_is_kept(self):
        user = generate_user_object({**USER, "Email": "other@b.com"})
        assert user["Email"] == "other@b.com"

    def test_custom_username_leaves_email_empty(self):
        user = generate_user_object({**USER, "IsCustomUsername": "true"})
        assert user["Email"] == ""
        assert user["IsCustomUsername"] == "true"

    def test_unknown_fields_are_dropped(self):
        assert "Nickname" not in generate_user_object({**USER, "Nickname": "x"})

    def test_missing_required_fields(self):
        with pytest.raises(ValidationError, match="FirstName, LastName"):
            generate_user_object({"UserName": "a", "DisableMessages": True})

    def test_empty_object(self):
        with pytest.raises(ValidationError):
            generate_user_object({})


class TestGenerateModuleResultObject:

    def test_field_order_and_values(self):
        result = generate_module_result_object(
            {
                "Note": "done",
                "Completed": True,
                "UserId": "u1",
                "Score": "90",
                "CourseId": "c1",
                "UpdatedAt": "2024-01-01T00:00:00.000Z",
            }
        )
        assert list(result.items()) == [
            ("CourseId", "c1"),
            ("UserId", "u1"),
            ("Score", "90"),
            ("Completed", True),
            ("UpdatedAt", "2024-01-01T00:00:00.000Z"),
            ("Note", "done"),
        ]

    def test_updated_at_defaults_to_now(self):
        result = generate_module_result_object(
            {"CourseId": "c1", "UserId": "u1", "Completed": False}
        )
        assert re.fullmatch(
            r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", result["UpdatedAt"]
        )

    def test_missing_required_fields(self):
        with pytest.raises(ValidationError, match="Completed"):
            generate_module_result_object({"CourseId": "c1", "UserId": "u1"})

    def test_falsy_input(self):
        with pytest.raises(ValidationError):
            generate_module_result_object(None)
