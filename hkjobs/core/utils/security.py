from pydantic import EmailStr


def mask_email(email: str | EmailStr) -> str:
    """jane.doe@example.com -> ja***@ex***, for log lines."""
    local, sep, domain = str(email).partition("@")
    if not sep:
        return "***"
    return f"{local[:2] or '**'}***@{domain[:2] or '**'}***"


def mask_token(token: str | None) -> str:
    """Keep the last four characters of a credential for log correlation."""
    if not token:
        return "<none>"
    if len(token) <= 8:
        return "***"
    return f"***{token[-4:]}"


def normalize_email(email: str) -> str:
    return email.strip().lower()
