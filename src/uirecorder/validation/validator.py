"""
Step Validator

Re-resolves freshly recorded steps through the replay finder to catch
ambiguous or fragile locators before they are exported.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..exceptions import MalformedLocatorError
from ..locators.finder import ReplayFinder
from ..locators.paths import structurally_equal
from ..logging import get_logger
from ..tree.interfaces import TreeNode

if TYPE_CHECKING:
    from ..recording.steps import Step

logger = get_logger(__name__)

AMBIGUOUS_REASON = "locator is ambiguous — multiple nodes may share it"
NOT_DURABLE_REASON = "locator is not durable"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one step. Never persisted."""

    ok: bool
    reason: str | None = None

    @classmethod
    def passed(cls) -> ValidationResult:
        return cls(True)

    @classmethod
    def failed(cls, reason: str) -> ValidationResult:
        return cls(False, reason)


class StepValidator:
    """Checks that a step's locator finds the control that was recorded.

    Controls are compared by structural position, not identity: the found
    control must have the same type tag and the same same-type index at
    every level up to the root boundary. A locator matching several controls
    fails even when the first match is the recorded one.

    Example:
        ```python
        validator = StepValidator(window)
        result = validator.validate(step, button)
        if not result.ok:
            step = step.with_validation_failure(result.reason)
        ```
    """

    def __init__(self, root: TreeNode, finder: ReplayFinder | None = None) -> None:
        """Initialize the validator.

        Args:
            root: Root of the tree steps are recorded against
            finder: Finder used for re-resolution (default: ReplayFinder(root))
        """
        self.root = root
        self.finder = finder or ReplayFinder(root)

    def validate(self, step: Step, original_node: TreeNode | None = None) -> ValidationResult:
        """Validate a single step.

        Args:
            step: The recorded step
            original_node: The control the locator was resolved for; when
                None only the lookup itself is checked

        Returns:
            ValidationResult; failures carry a human-readable reason
        """
        locator = step.locator
        if not step.kind.is_control_scoped or not locator.is_scoped:
            return ValidationResult.passed()
        if not locator.is_durable:
            return ValidationResult.failed(NOT_DURABLE_REASON)

        try:
            result = self.finder.lookup(locator)
        except MalformedLocatorError as e:
            logger.warning("validation_malformed_locator", locator=locator.value, detail=e.detail)
            return ValidationResult.failed(f"not found: {locator.value} ({e.detail})")

        if result.node is None:
            return ValidationResult.failed(f"not found: {locator.value}")

        if original_node is None:
            return ValidationResult.passed()

        if result.is_ambiguous or not structurally_equal(result.node, original_node):
            logger.debug(
                "validation_mismatch",
                locator=locator.value,
                strategy=result.strategy_name,
                matches=len(result.candidates),
            )
            return ValidationResult.failed(AMBIGUOUS_REASON)

        return ValidationResult.passed()
