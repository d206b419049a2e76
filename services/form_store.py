"""
Form State Store
================
Owns the in-progress intake answers and every mutation of them.

Each update replaces top-level fields (lists are replaced wholesale, never
merged) and synchronously writes the full record through the persistence
port. A missing or unreadable saved record is never an error: the store
falls back to the default answers.
"""

import json
import logging
from dataclasses import replace
from typing import Any, Optional

from calculator_models import FormAnswers
from services.persistence import PersistencePort

logger = logging.getLogger(__name__)


class FormStateStore:
    """
    Service for the intake form state.

    Args:
        port: Persistence slot holding the answers as a JSON object
    """

    def __init__(self, port: PersistencePort):
        self.port = port
        self._answers: Optional[FormAnswers] = None

    @property
    def answers(self) -> FormAnswers:
        """Current answers, loading them from the port on first access."""
        if self._answers is None:
            return self.load()
        return self._answers

    def load(self) -> FormAnswers:
        """
        Read the saved answers, merged over the defaults.

        Returns:
            FormAnswers (defaults when nothing usable is saved)
        """
        self._answers = self._read()
        return self._answers

    def _read(self) -> FormAnswers:
        try:
            text = self.port.load()
        except OSError as e:
            logger.warning("Could not read saved answers, using defaults: %s", e)
            return FormAnswers()

        if not text:
            return FormAnswers()

        try:
            data = json.loads(text)
        except (ValueError, TypeError) as e:
            logger.warning("Saved answers are not valid JSON, using defaults: %s", e)
            return FormAnswers()

        if not isinstance(data, dict):
            logger.warning("Saved answers are a %s, not an object; using defaults", type(data).__name__)
            return FormAnswers()

        return FormAnswers.from_dict(data)

    def update(self, **changes: Any) -> FormAnswers:
        """
        Replace the given top-level fields and persist the full record.

        Raises:
            TypeError: if a keyword is not a FormAnswers field
        """
        updated = replace(self.answers, **changes)
        self._write(updated)
        self._answers = updated
        return updated

    def reset(self) -> FormAnswers:
        """Clear the saved record and return to the defaults."""
        self.port.clear()
        self._answers = FormAnswers()
        logger.info("Form answers reset")
        return self._answers

    def _write(self, answers: FormAnswers) -> None:
        self.port.save(json.dumps(answers.to_dict(), ensure_ascii=False))
