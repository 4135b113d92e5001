import re

# Minimum length required for a valid password
# Example: Must have at least 8 characters
PASSWORD_MIN_LENGTH = 8

# Minimum length of a display name
NAME_MIN_LENGTH = 2

# Password character classes, checked one by one so each failure gets its own message
PASSWORD_UPPERCASE = re.compile(r"[A-Z]")
PASSWORD_LOWERCASE = re.compile(r"[a-z]")
PASSWORD_DIGIT = re.compile(r"[0-9]")
PASSWORD_SPECIAL = re.compile(r"[^A-Za-z0-9]")

# Validates an http(s) URL, used for profile links
# Example: "https://www.linkedin.com/in/someone"
HTTP_URL_VALIDATOR = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)

# Validates a phone number with optional leading +
# Example: "+85291234567" or "91234567"
PHONE_NUMBER_REGEX = re.compile(r"^\+?\d{5,20}$")


def password_policy_errors(password: str) -> list[str]:
    """Return every password rule the value breaks, in a stable order."""
    errors: list[str] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if not PASSWORD_UPPERCASE.search(password):
        errors.append("Password must contain at least one uppercase letter")
    if not PASSWORD_LOWERCASE.search(password):
        errors.append("Password must contain at least one lowercase letter")
    if not PASSWORD_DIGIT.search(password):
        errors.append("Password must contain at least one number")
    if not PASSWORD_SPECIAL.search(password):
        errors.append("Password must contain at least one special character")
    return errors
