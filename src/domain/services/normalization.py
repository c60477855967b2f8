"""Domain normalization helpers."""


def normalize_text(value: str | None) -> str | None:
    """Strip optional free text, mapping blanks to None.

    Args:
        value: Raw text from a form or repository.

    Returns:
        str | None: Cleaned text or None.
    """
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


def normalize_email(email: str | None) -> str:
    """Normalize an email into its case-insensitive key.

    Args:
        email: Raw email address.

    Returns:
        str: Stripped, lower-cased email (empty string for None).
    """
    if not email:
        return ""
    return email.strip().lower()


__all__ = ["normalize_text", "normalize_email"]
