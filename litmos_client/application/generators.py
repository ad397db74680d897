"""
Helpers that build write payloads in the field order Litmos requires.

Litmos maps XML children positionally, so records sent to the create/update
endpoints must list their fields in the documented order. Python dicts keep
insertion order, which is what these builders rely on.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Mapping

from .exceptions import ValidationError

_USER_REQUIRED = ("UserName", "FirstName", "LastName", "DisableMessages")

_USER_CONTACT_FIELDS = ("Skype", "PhoneWork", "PhoneMobile")

_USER_PROFILE_FIELDS = (
    "Street1",
    "Street2",
    "City",
    "State",
    "PostalCode",
    "Country",
    "CompanyName",
    "JobTitle",
    *(f"CustomField{n}" for n in range(1, 11)),
    "Culture",
    "Brand",
    "ManagerId",
    "ManagerName",
    "EnableTextNotification",
    "Website",
    "Twitter",
    "ExpirationDate",
)

_MODULE_RESULT_REQUIRED = ("CourseId", "UserId", "Completed")


def _require(obj: Mapping[str, Any], fields: Iterable[str], label: str):
    missing = [name for name in fields if name not in obj]
    if missing:
        raise ValidationError(
            f"Missing required elements for {label}: {', '.join(missing)}"
        )


def _copy_present(source: Mapping[str, Any], target: Dict[str, Any], fields):
    for name in fields:
        if name in source:
            target[name] = source[name]


def _iso_now() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_user_object(obj: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Builds a User record for the "Create User" endpoint.

    `UserName`, `FirstName`, `LastName` and `DisableMessages` are required.
    Read-only fields (`Id`, `FullName`, `LastLogin`, `LoginKey`) are sent
    empty. When no `Email` is given it defaults to the `UserName`, unless
    `IsCustomUsername` is set, in which case it is left empty.

    Args:
        obj: The user fields to copy.

    Returns:
        A new dict with the fields in vendor order.

    Raises:
        ValidationError: If a required field is missing.
    """

    if not obj:
        raise ValidationError("Empty object provided to user object generation")
    _require(obj, _USER_REQUIRED, "User creation")

    custom_username = obj.get("IsCustomUsername")
    if obj.get("Email"):
        email = obj["Email"]
    elif custom_username and str(custom_username).lower() != "false":
        email = ""
    else:
        email = obj["UserName"]

    user = {
        "Id": "",
        "UserName": obj["UserName"],
        "FirstName": obj["FirstName"],
        "LastName": obj["LastName"],
        "FullName": "",
        "Email": email,
        "AccessLevel": obj.get("AccessLevel") or "Learner",
        "DisableMessages": obj["DisableMessages"],
        "Active": obj.get("Active", "true"),
    }
    _copy_present(obj, user, _USER_CONTACT_FIELDS)
    user["LastLogin"] = ""
    user["LoginKey"] = ""
    user["IsCustomUsername"] = custom_username or "false"
    _copy_present(obj, user, ("Password",))
    user["SkipFirstLogin"] = obj.get("SkipFirstLogin") or "false"
    # An empty TimeZone falls back to the organisation's zone
    user["TimeZone"] = obj.get("TimeZone") or ""
    _copy_present(obj, user, _USER_PROFILE_FIELDS)

    return user


def generate_module_result_object(obj: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Builds a ModuleResult record for posting a module completion.

    `CourseId`, `UserId` and `Completed` are required; `UpdatedAt` defaults to
    the current UTC time.
    """

    if not obj:
        raise ValidationError(
            "Empty object provided to module result object generation"
        )
    _require(obj, _MODULE_RESULT_REQUIRED, "Module Completion creation")

    result = {"CourseId": obj["CourseId"], "UserId": obj["UserId"]}
    _copy_present(obj, result, ("Score",))
    result["Completed"] = obj["Completed"]
    result["UpdatedAt"] = obj.get("UpdatedAt") or _iso_now()
    _copy_present(obj, result, ("Note",))

    return result
