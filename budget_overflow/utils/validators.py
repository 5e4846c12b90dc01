"""입력 검증 유틸리티 — 이름, 이메일, 비밀번호, 날짜, 거래 유형.

Input validation helpers shared by request schemas and services.
Each check is pure and runs before any database access.
"""

import re
from datetime import date, datetime

NAME_MIN_LENGTH: int = 2
NAME_MAX_LENGTH: int = 20
EMAIL_MAX_LENGTH: int = 254
PASSWORD_MIN_LENGTH: int = 8
PASSWORD_MAX_LENGTH: int = 20

# 문자/아포스트로피/마침표 단어를 단일 공백으로 연결 (Letter/apostrophe/dot words joined by single spaces)
_NAME_RE = re.compile(r"^[A-Za-z'.]+(?: [A-Za-z'.]+)*$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize_email(email: str) -> str:
    """이메일을 공백 제거 후 소문자로 정규화합니다 (Trim and lowercase)."""
    return email.strip().lower()


def is_valid_name(name: str) -> bool:
    """이름 규칙: 2~20자, 영문자/공백/아포스트로피/마침표만 허용."""
    return NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH and bool(_NAME_RE.match(name))


def is_valid_email(email: str) -> bool:
    """정규화된 이메일의 길이와 형식을 확인합니다 (Expects an already normalized email)."""
    return len(email) <= EMAIL_MAX_LENGTH and bool(_EMAIL_RE.match(email))


def is_strong_password(password: str) -> bool:
    """비밀번호 강도 검사.

    Password policy: 8-20 characters with at least one uppercase letter,
    one lowercase letter, one digit and one symbol.
    """
    return (
        PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH
        and re.search(r"[A-Z]", password) is not None
        and re.search(r"[a-z]", password) is not None
        and re.search(r"[0-9]", password) is not None
        and re.search(r"[^A-Za-z0-9]", password) is not None
    )


def parse_iso_date(value: str) -> date:
    """YYYY-MM-DD 또는 ISO 타임스탬프를 날짜로 변환합니다.

    Parse "YYYY-MM-DD" or a full ISO timestamp into a calendar date.

    Raises:
        ValueError: 형식이 잘못된 경우 (Unparseable value)
    """
    value = value.strip()
    if _ISO_DATE_RE.match(value):
        return date.fromisoformat(value)
    # "Z" 접미사는 fromisoformat이 3.11 이전에 지원하지 않음 (Normalize trailing Z)
    return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
