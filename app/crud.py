import re
import time
from typing import Any, Dict, List

from loguru import logger

from . import schemas
from .exceptions import ContactValidationError
from .store import ContactStore

NAME_RE = re.compile(r"^[a-zA-ZáéíóúÁÉÍÓÚñÑüÜ\s'-]+$")
NAME_MIN_LENGTH, NAME_MAX_LENGTH = 2, 50
PHONE_MIN_DIGITS, PHONE_MAX_DIGITS = 7, 15


def sanitize_text(text) -> str:
    if not text:
        return ""
    return re.sub(r"\s+", " ", text.strip())


def normalize_phone(phone) -> str:
    if not phone:
        return ""
    return re.sub(r"\D", "", phone)


def is_valid_name(name) -> bool:
    if not name:
        return False
    return bool(NAME_RE.match(name)) and NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH


def is_valid_phone(phone) -> bool:
    return PHONE_MIN_DIGITS <= len(normalize_phone(phone)) <= PHONE_MAX_DIGITS


def validate_contact(contact: schemas.ContactCreate) -> List[str]:
    """
    Check a candidate contact against the field rules.

    :param contact: Candidate contact as received from the client
    :return: One message per violated field, empty when the contact is valid
    """
    errors = []

    for value, label in ((contact.first_name, "First name"), (contact.last_name, "Last name")):
        value = sanitize_text(value)
        if not value:
            errors.append(f"{label} is required")
        elif not is_valid_name(value):
            errors.append(
                f"{label} must contain only letters and be "
                f"{NAME_MIN_LENGTH} to {NAME_MAX_LENGTH} characters long"
            )

    phone = (contact.phone or "").strip()
    if not phone:
        errors.append("Phone is required")
    elif not is_valid_phone(phone):
        errors.append(f"Phone must contain between {PHONE_MIN_DIGITS} and {PHONE_MAX_DIGITS} digits")

    return errors


def generate_id(contacts: List[Dict[str, Any]]) -> str:
    # Millisecond timestamp, bumped past the newest numeric id to stay unique
    new_id = time.time_ns() // 1_000_000
    for contact in contacts:
        try:
            new_id = max(new_id, int(contact.get("id", "")) + 1)
        except (TypeError, ValueError, AttributeError):
            continue
    return str(new_id)


def get_contacts(store: ContactStore) -> List[Dict[str, Any]]:
    return store.load_all()


def create_contact(store: ContactStore, contact: schemas.ContactCreate) -> Dict[str, Any]:
    errors = validate_contact(contact)
    if errors:
        raise ContactValidationError(errors)

    contacts = store.load_all()
    db_contact = schemas.ContactRead(
        id=generate_id(contacts),
        first_name=sanitize_text(contact.first_name),
        last_name=sanitize_text(contact.last_name),
        phone=normalize_phone(contact.phone),
    ).model_dump(by_alias=True)

    contacts.append(db_contact)
    store.save_all(contacts)
    logger.info(f"Created contact {db_contact['id']} ({db_contact['firstName']} {db_contact['lastName']})")
    return db_contact


def matches_query(contact: Dict[str, Any], query: str) -> bool:
    query = query.strip()
    if not query:
        return True
    if not isinstance(contact, dict):
        return False
    lowered = query.lower()
    return (
        lowered in str(contact.get("firstName") or "").lower()
        or lowered in str(contact.get("lastName") or "").lower()
        or query in str(contact.get("phone") or "")
    )


def search_contacts(store: ContactStore, query: str) -> List[Dict[str, Any]]:
    return [contact for contact in store.load_all() if matches_query(contact, query)]
