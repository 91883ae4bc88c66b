"""HTTP client for the ontology API."""

from typing import Any
from urllib.parse import quote

import requests
from loguru import logger

from ontology_cards.config import resolve_api_base_url, resolve_request_timeout
from ontology_cards.models.ontology import OntologyClass, OntologyFile, integrity_problems


class ApiError(RuntimeError):
    """The ontology API rejected a request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


# Raised by the model constructors on records missing fields or with bad values.
_PARSE_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


def _segment(value: str) -> str:
    return quote(value, safe="")


class OntologyApi:
    """Encapsulated ontology API over a shared requests session."""

    def __init__(self, base_url: str | None = None, *, timeout: float | None = None) -> None:
        self.base_url = (base_url or resolve_api_base_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else resolve_request_timeout()
        self.sess = requests.Session()
        self.sess.headers.update({"Accept": "application/json"})
        logger.debug("API ready: base_url {!r}, timeout {}s", self.base_url, self.timeout)

    def request(self, method: str, path: str, *, json: Any = None) -> Any:
        """Send a request and return the decoded JSON body (None when empty)."""
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("Making request: {} {}", method, url)

        r = self.sess.request(method, url, json=json, timeout=self.timeout)
        if not r.ok:
            raise ApiError(_error_detail(r), status_code=r.status_code)
        if not r.content:
            return None
        return r.json()

    def list_files(self) -> list[OntologyFile]:
        """List the source files the API serves."""
        rv = self.request("GET", "ontology/files")
        items = rv.get("files", []) if isinstance(rv, dict) else rv or []
        try:
            return [OntologyFile.from_dict(item) for item in items]
        except _PARSE_ERRORS as e:
            raise ApiError(f"Malformed file record: {e!r}") from e

    def list_classes(self, file: str) -> list[OntologyClass]:
        """Fetch all classes of a file, logging any stats/list mismatches."""
        rv = self.request("GET", f"ontology/files/{_segment(file)}/classes")
        items = rv.get("classes", []) if isinstance(rv, dict) else rv or []
        try:
            classes = [OntologyClass.from_dict(item) for item in items]
        except _PARSE_ERRORS as e:
            raise ApiError(f"Malformed class record: {e!r}") from e
        for cls in classes:
            for problem in integrity_problems(cls):
                logger.warning("Integrity check failed: {}", problem)
        logger.debug("Fetched {} classes from {!r}", len(classes), file)
        return classes

    def create_node(self, file: str, data: dict[str, Any]) -> dict[str, Any]:
        return self.request("POST", f"ontology/files/{_segment(file)}/nodes", json=data) or {}

    def update_node(self, file: str, node_id: str, data: dict[str, Any]) -> dict[str, Any]:
        path = f"ontology/files/{_segment(file)}/nodes/{_segment(node_id)}"
        return self.request("PUT", path, json=data) or {}

    def delete_node(self, file: str, node_id: str) -> dict[str, Any]:
        path = f"ontology/files/{_segment(file)}/nodes/{_segment(node_id)}"
        return self.request("DELETE", path) or {}

    def create_relationship(self, file: str, data: dict[str, Any]) -> dict[str, Any]:
        path = f"ontology/files/{_segment(file)}/relationships"
        return self.request("POST", path, json=data) or {}


def _error_detail(response: requests.Response) -> str:
    """Prefer the server's `detail` field, fall back to the HTTP reason."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("detail"):
        detail = body["detail"]
        return detail if isinstance(detail, str) else str(detail)
    return f"HTTP {response.status_code} {response.reason or ''}".strip()
