import re
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from . import crud, schemas
from .exceptions import ContactValidationError, TransportError

API_URL = "http://localhost:3001"
CONTACTS_PATH = "/api/contacts"


class ContactView:
    """Local copy of the server's contact list. The server is the source of truth."""

    def __init__(self):
        self.contacts: List[Dict[str, Any]] = []

    def replace(self, contacts):
        self.contacts = list(contacts)

    def filter(self, query: str) -> List[Dict[str, Any]]:
        return [contact for contact in self.contacts if crud.matches_query(contact, query)]

    @property
    def count(self) -> int:
        return len(self.contacts)


class ContactClient:
    """
    HTTP client for the contact book API.

    Any httpx.Client works as transport, including FastAPI's TestClient.
    Validation problems raise ContactValidationError, everything that
    went wrong on the way to or from the server raises TransportError.
    """

    def __init__(self, base_url: str = API_URL, http: Optional[httpx.Client] = None, timeout: float = 10.0):
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.view = ContactView()

    def close(self):
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = self.http.request(method, url, headers={"Accept": "application/json"}, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise TransportError(f"Could not reach the contact server: {e}") from e

        if response.status_code == 400:
            body = self._json(response)
            errors = body.get("errors") if isinstance(body, dict) else None
            message = body.get("message") if isinstance(body, dict) else None
            raise ContactValidationError(errors or [message or response.text])
        if response.is_error:
            raise TransportError(
                f"HTTP error: {response.status_code} - {response.reason_phrase}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _json(response: httpx.Response):
        try:
            return response.json()
        except ValueError:
            return None

    def load(self) -> List[Dict[str, Any]]:
        """
        Fetch the full contact list and replace the local view with it.

        :return: Contacts as returned by the server
        """
        response = self._request("GET", CONTACTS_PATH)
        data = self._json(response)
        if not isinstance(data, list):
            raise TransportError("Invalid response format: expected a list of contacts")
        self.view.replace(data)
        return self.view.contacts

    def search(self, query: str) -> List[Dict[str, Any]]:
        response = self._request("GET", f"{CONTACTS_PATH}/search", params={"query": query})
        data = self._json(response)
        if not isinstance(data, list):
            raise TransportError("Invalid response format: expected a list of contacts")
        return data

    def add(self, first_name: str, last_name: str, phone: str) -> List[Dict[str, Any]]:
        """
        Create a contact, then reload the list.

        The same field rules as the server are checked before sending.

        :return: Reloaded contact list
        """
        try:
            contact = schemas.ContactCreate(first_name=first_name, last_name=last_name, phone=phone)
        except ValidationError as e:
            raise ContactValidationError(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
            ) from e
        errors = crud.validate_contact(contact)
        if errors:
            raise ContactValidationError(errors)

        payload = schemas.ContactCreate(
            first_name=crud.sanitize_text(first_name),
            last_name=crud.sanitize_text(last_name),
            phone=crud.normalize_phone(phone),
        ).model_dump(by_alias=True)
        self._request("POST", CONTACTS_PATH, json=payload)
        logger.info(f"Contact \"{payload['firstName']} {payload['lastName']}\" added")
        return self.load()


def format_phone(phone) -> str:
    if not phone:
        return ""
    cleaned = crud.normalize_phone(phone)
    if len(cleaned) == 10:
        return re.sub(r"(\d{3})(\d{3})(\d{4})", r"(\1) \2-\3", cleaned)
    if len(cleaned) == 11 and cleaned.startswith("1"):
        return re.sub(r"(\d)(\d{3})(\d{3})(\d{4})", r"+\1 (\2) \3-\4", cleaned)
    return phone


def initials(full_name) -> str:
    if not full_name:
        return "??"
    return "".join(part[0].upper() for part in full_name.split() if part)[:2]
