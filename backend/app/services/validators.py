# app/services/validators.py
"""
Profile field validation and sanitisation.

Each validator returns the sanitised value or raises ValidationError with a
message suitable for showing to the user.
"""
import uuid

from pydantic import EmailStr, HttpUrl, TypeAdapter
from pydantic import ValidationError as SchemaError

from app.core.errors import ValidationError

_email = TypeAdapter(EmailStr)
_http_url = TypeAdapter(HttpUrl)

GENDERS = ("male", "female", "others", "prefer not to say")
MAX_SKILLS = 10
MAX_SKILL_LENGTH = 30
MAX_BIO_LENGTH = 200

# Fields a user may change through the profile update endpoint
PROFILE_UPDATE_FIELDS = ("firstName", "lastName", "gender", "skills", "bio", "age", "photoURL")


def parse_id(value, label: str = "ID") -> uuid.UUID:
    try:
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        raise ValidationError(f"Invalid {label} format")


def validate_first_name(value: str) -> str:
    value = (value or "").strip()
    if not 2 <= len(value) <= 30:
        raise ValidationError("First name must be between 2 and 30 characters")
    return value


def validate_last_name(value: str) -> str:
    value = (value or "").strip()
    if len(value) > 30:
        raise ValidationError("Last name cannot exceed 30 characters")
    return value


def validate_email(value: str) -> str:
    try:
        email = _email.validate_python((value or "").strip())
    except SchemaError:
        raise ValidationError("Please provide a valid email address")
    return email.lower()


def validate_password(value: str) -> str:
    if not isinstance(value, str) or not 6 <= len(value) <= 30:
        raise ValidationError("Password must be between 6 and 30 characters")
    return value


def validate_age(value) -> int:
    try:
        age = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Age must be between 18 and 150 years")
    if not 18 <= age <= 150:
        raise ValidationError("Age must be between 18 and 150 years")
    return age


def validate_gender(value: str) -> str:
    gender = (value or "").strip().lower()
    if gender not in GENDERS:
        raise ValidationError("Gender must be one of: " + ", ".join(GENDERS))
    return gender


def validate_skills(value) -> list[str]:
    """Trimmed skills; blank entries are dropped before the limits apply."""
    if not isinstance(value, list):
        raise ValidationError("Skills must be a list")
    skills = []
    for skill in value:
        if not isinstance(skill, str):
            raise ValidationError("Each skill must be a string")
        skill = skill.strip()
        if not skill:
            continue
        if len(skill) > MAX_SKILL_LENGTH:
            raise ValidationError(f"Each skill cannot exceed {MAX_SKILL_LENGTH} characters")
        skills.append(skill)
    if len(skills) > MAX_SKILLS:
        raise ValidationError(f"Maximum {MAX_SKILLS} skills allowed")
    return skills


def validate_bio(value: str) -> str:
    bio = (value or "").strip()
    if len(bio) > MAX_BIO_LENGTH:
        raise ValidationError(f"Bio cannot exceed {MAX_BIO_LENGTH} characters")
    return bio


def validate_photo_url(value: str) -> str:
    url = (value or "").strip()
    try:
        _http_url.validate_python(url)
    except SchemaError:
        raise ValidationError("Photo URL must be a valid HTTP/HTTPS URL")
    # Stored as given; HttpUrl would normalise it (trailing slash, host case)
    return url


# API field name -> (model attribute, validator)
_PROFILE_FIELDS = {
    "firstName": ("first_name", validate_first_name),
    "lastName": ("last_name", validate_last_name),
    "age": ("age", validate_age),
    "gender": ("gender", validate_gender),
    "skills": ("skills", validate_skills),
    "bio": ("bio", validate_bio),
    "photoURL": ("photo_url", validate_photo_url),
}


def validate_profile_update(data: dict) -> dict:
    """
    Validate a profile update body and map it to model attributes.

    Unknown keys are rejected as a whole, listing every offending field.
    Keys whose value is None are ignored.
    """
    invalid = [k for k in data if k not in PROFILE_UPDATE_FIELDS]
    if invalid:
        raise ValidationError("Invalid fields in update request: " + ", ".join(sorted(invalid)))
    cleaned = {}
    for key, value in data.items():
        if value is None:
            continue
        attr, validator = _PROFILE_FIELDS[key]
        cleaned[attr] = validator(value)
    return cleaned
