from enum import Enum

from pydantic import BaseModel


class Language(str, Enum):
    EN = "en"
    ID = "id"


def get_text(language: Language, en: str, id: str) -> str:
    """Pick the message for ``language``; falls back to English when empty."""
    if Language(language) == Language.ID and id:
        return id
    return en


class Notice(BaseModel):
    level: str  # success | error | warning | info
    message: str


def success(language: Language, en: str, id: str) -> Notice:
    return Notice(level="success", message=get_text(language, en, id))


def warning(language: Language, en: str, id: str) -> Notice:
    return Notice(level="warning", message=get_text(language, en, id))


def error(language: Language, raw_message: str, en: str, id: str) -> Notice:
    """Error notice showing the backend message when there is one."""
    return Notice(level="error", message=raw_message or get_text(language, en, id))


def status_label(language: Language, status: str) -> str:
    labels = {
        "In Use": ("In Use", "Sedang Digunakan"),
        "Scheduled": ("Scheduled", "Terjadwal"),
        "Available": ("Available", "Tersedia"),
    }
    en, id = labels.get(status, (status, status))
    return get_text(language, en, id)
