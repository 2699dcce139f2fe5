"""Local validation of user input before anything leaves the client."""

from typing import Optional

from .errors import ValidationError
from .models import EMAIL_PATTERN, Credentials, Registration, Role


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def validate_login(username: Optional[str], password: Optional[str]) -> Credentials:
    if _blank(username) or _blank(password):
        raise ValidationError("Username and password are required")
    return Credentials(username=username.strip(), password=password)


def validate_signup(
    username: Optional[str],
    email: Optional[str],
    password: Optional[str],
    role: Optional[str],
) -> Registration:
    """Check a registration form and return it trimmed and normalised.

    Raises:
        ValidationError: a field is blank, the e-mail is malformed or the
            role is not one of the known roles.
    """
    if any(_blank(v) for v in (username, email, password, role)):
        raise ValidationError("All fields are required")
    email = email.strip()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please enter a valid email address")
    parsed = Role.parse(role)
    if parsed is None:
        raise ValidationError(f"Unknown role: {role.strip()}")
    return Registration(
        username=username.strip(),
        email=email,
        password=password,
        role=parsed.value,
    )
