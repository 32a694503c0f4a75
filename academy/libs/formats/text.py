import re
import unicodedata

from academy.core.settings import settings

HHMM_PATTERN = r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$"


def normalize_answer(value: str | None) -> str:
    """
    Normalize a quiz answer before comparison
    - NFKC unicode normalization
    - trim, collapse inner whitespace
    - lower case
    """
    if value is None:
        return ""
    text = unicodedata.normalize("NFKC", str(value))
    text = re.sub(r"\s+", " ", text).strip()
    return text.lower()


def parent_email(parent_phone_number: str) -> str:
    digits = re.sub(r"[^0-9]", "", parent_phone_number)
    return f"parent_{digits}@{settings.PARENT_EMAIL_DOMAIN}"


def first_name(full_name: str) -> str:
    parts = full_name.strip().split(" ")
    return parts[0] if parts and parts[0] else full_name


def public_storage_url(value: str | None) -> str | None:
    """
    Turn a bucket object key into its public URL
    - None / "" -> None
    - http(s) URL -> unchanged
    - key -> R2_PUBLIC_URL + "/" + key (unchanged if no public URL configured)
    """
    if not value:
        return None
    if value.startswith("http://") or value.startswith("https://"):
        return value
    base = settings.R2_PUBLIC_URL
    if not base:
        return value
    key = value.lstrip("/")
    return f"{base}{key}" if base.endswith("/") else f"{base}/{key}"
