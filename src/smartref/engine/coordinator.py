"""Generation-counter cancellation for keystroke-driven validation.

Hosts validate the text of an input field after a short quiet period. When a
newer validation for the same field starts before an older one finishes, the
older result must not be applied. Each submission takes a generation number
for its field; a result is only returned if its generation is still the
latest when it completes. Superseded fetches are not aborted: they finish
and leave their bounds in the cache for the next call.
"""

from __future__ import annotations

import logging

from smartref.engine.schemas import ParsedReference, ValidationResult
from smartref.engine.validator import ReferenceValidator

logger = logging.getLogger(__name__)

DEFAULT_FIELD = "default"


class ValidationCoordinator:
    """Runs validations and discards results that were superseded."""

    def __init__(self, validator: ReferenceValidator):
        self.validator = validator
        self._generations: dict[str, int] = {}

    def begin(self, field: str = DEFAULT_FIELD) -> int:
        """Start a new generation for a field, superseding earlier ones."""
        generation = self._generations.get(field, 0) + 1
        self._generations[field] = generation
        return generation

    def current(self, field: str = DEFAULT_FIELD) -> int:
        return self._generations.get(field, 0)

    def is_current(self, field: str, generation: int) -> bool:
        return self._generations.get(field, 0) == generation

    async def submit(
        self,
        reference: ParsedReference,
        version_id: str,
        field: str = DEFAULT_FIELD,
    ) -> ValidationResult | None:
        """Validate for a field.

        Returns:
            The ValidationResult, or None if a newer submission for the
            same field started while this one was running
        """
        generation = self.begin(field)
        result = await self.validator.validate(reference, version_id)

        if not self.is_current(field, generation):
            logger.debug(
                f"Discarding stale validation for field {field!r} "
                f"(generation {generation}, current {self.current(field)})"
            )
            return None

        return result

    def cancel(self, field: str = DEFAULT_FIELD) -> None:
        """Supersede any in-flight validation for a field without starting one."""
        self.begin(field)
