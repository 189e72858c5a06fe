"""Password validation rules for registration and password changes."""

MIN_PASSWORD_LENGTH = 6


def validate_password(password: str, email: str) -> list[str]:
    """Validate password strength. Returns list of error messages (empty = valid)."""
    errors: list[str] = []

    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if email and password.lower() == email.lower():
        errors.append("Password cannot be your email address")

    if len(password) > 0 and len(set(password)) == 1:
        errors.append("Password cannot be a single repeated character")

    return errors
