"""Stateful viewer session: owns the API client and the current state."""

import random
from collections.abc import Callable
from typing import Any

import requests
from loguru import logger

from ontology_cards.core.session import state as st
from ontology_cards.core.session.keys import KeyResult, handle_key
from ontology_cards.core.write import client
from ontology_cards.models.ontology import OntologyClass, OntologyFile
from ontology_cards.protocols import OntologyApiProtocol


class ViewerSession:
    """One user's flash-card session.

    All state lives in `self.state` and is only ever replaced by reducers
    from `ontology_cards.core.session.state`.
    """

    def __init__(self, api: OntologyApiProtocol, *, rng: random.Random | None = None) -> None:
        self.api = api
        self.rng = rng
        self.state = st.ViewerState()
        self.files: list[OntologyFile] = []

    @property
    def current(self) -> OntologyClass | None:
        return st.current_class(self.state)

    def dispatch(
        self, reducer: Callable[..., st.ViewerState], *args: Any, **kwargs: Any
    ) -> st.ViewerState:
        """Apply a reducer to the session state and keep the result."""
        self.state = reducer(self.state, *args, **kwargs)
        return self.state

    def key(self, key: str, *, in_text_input: bool = False) -> KeyResult:
        result = handle_key(self.state, key, in_text_input=in_text_input, rng=self.rng)
        self.state = result.state
        return result

    # --- Loading ---

    def load_files(self) -> list[OntologyFile]:
        """List source files and open the first one if none is selected."""
        try:
            self.files = self.api.list_files()
        except (RuntimeError, requests.RequestException) as e:
            logger.error("Error loading files: {}", e)
            self.dispatch(st.set_error, f"Failed to load ontology files: {e}")
            return []
        if self.files and not self.state.file:
            self.load(self.files[0].filename)
        return self.files

    def select_file(self, file: str) -> None:
        if file:
            self.load(file)
        else:
            self.dispatch(st.clear_file)

    def load(self, file: str) -> None:
        """Fetch the classes of a file and rebuild the view."""
        self.state, generation = st.begin_load(self.state, file)
        try:
            classes = self.api.list_classes(file)
        except (RuntimeError, requests.RequestException) as e:
            logger.error("Error loading classes from {}: {}", file, e)
            self.dispatch(st.fail_load, generation, f"Failed to load ontology classes: {e}")
            return
        self.dispatch(st.complete_load, generation, classes, rng=self.rng)
        logger.info("Loaded {} classes from {}", len(self.state.classes), file)

    def refresh(self) -> None:
        if self.state.file:
            self.load(self.state.file)

    # --- Mutations ---

    def _require_file(self) -> bool:
        if not self.state.file:
            self.dispatch(st.set_error, "Please select an ontology file first")
            return False
        self.dispatch(st.clear_error)
        return True

    def _after_write(self, result: dict[str, Any]) -> dict[str, Any]:
        if result["success"]:
            logger.info("Write succeeded, reloading classes")
            self.refresh()
        else:
            self.dispatch(st.set_error, result["error"])
        return result

    def save_node(self, data: dict[str, Any], *, node_id: str | None = None) -> dict[str, Any]:
        """Create a node, or update node_id when given."""
        if not self._require_file():
            return {"success": False, "error": self.state.error}
        if node_id:
            result = client.update_node(self.api, file=self.state.file, node_id=node_id, data=data)
        else:
            result = client.create_node(self.api, file=self.state.file, data=data)
        return self._after_write(result)

    def delete_node(self, node_id: str) -> dict[str, Any]:
        if not self._require_file():
            return {"success": False, "error": self.state.error}
        previous_index = self.state.current_index
        previous_length = len(self.state.visible)
        result = self._after_write(
            client.delete_node(self.api, file=self.state.file, node_id=node_id)
        )
        if result["success"]:
            self.dispatch(st.after_delete, previous_index, previous_length)
        return result

    def create_relationship(self, data: dict[str, Any]) -> dict[str, Any]:
        if not self._require_file():
            return {"success": False, "error": self.state.error}
        return self._after_write(
            client.create_relationship(self.api, file=self.state.file, data=data)
        )
