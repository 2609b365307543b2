"""Pluggable validators for configuration trees.

A validator is anything with a ``validate(tree) -> ValidationResult``
method; plain callables with the same signature are accepted too. The
registry runs every validator against the same tree and aggregates all
failures instead of stopping at the first one.

Usage:
    from ops_toolkit.core.config.validators import ValidationResult, ValidatorRegistry

    def refresh_positive(tree):
        if tree["monitor"]["refreshInterval"] <= 0:
            return ValidationResult.fail("monitor.refreshInterval must be positive")
        return ValidationResult.ok()

    registry = ValidatorRegistry()
    registry.register("refresh", refresh_positive)
    passed, errors = registry.run_all(tree)
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ValidationError

from ops_toolkit.core.config.models import Config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single validator.

    Attributes:
        passed: True if the tree satisfied the validator.
        errors: Human-readable reasons for failure (empty when passed).

    """

    passed: bool
    errors: list[str] = field(default_factory=list)

    @classmethod
    def ok(cls) -> ValidationResult:
        """Create a passing result."""
        return cls(passed=True)

    @classmethod
    def fail(cls, *errors: str) -> ValidationResult:
        """Create a failing result with one or more reasons."""
        return cls(passed=False, errors=list(errors))


@runtime_checkable
class Validator(Protocol):
    """Single-method capability checking a configuration tree."""

    def validate(self, tree: dict[str, Any]) -> ValidationResult:
        """Check the tree and report the outcome."""
        ...


ValidatorLike = Validator | Callable[[dict[str, Any]], ValidationResult]


class ValidatorRegistry:
    """Named, ordered collection of validators.

    Validators run in registration order. Re-registering a name replaces
    the validator but keeps its position.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._validators: dict[str, ValidatorLike] = {}

    def register(self, name: str, validator: ValidatorLike) -> None:
        """Store or replace the validator under name.

        Raises:
            ValueError: If name is empty.
            TypeError: If validator has no validate() method and is not callable.

        """
        if not name:
            raise ValueError("Validator name cannot be empty")
        if not isinstance(validator, Validator) and not callable(validator):
            raise TypeError(
                f"Validator '{name}' must define validate() or be callable, "
                f"got {type(validator).__name__}"
            )
        if name in self._validators:
            logger.debug("Replacing config validator '%s'", name)
        self._validators[name] = validator

    def unregister(self, name: str) -> bool:
        """Remove a validator. Returns False if it was not registered."""
        return self._validators.pop(name, None) is not None

    def names(self) -> list[str]:
        """Get registered names in run order."""
        return list(self._validators)

    def __len__(self) -> int:
        return len(self._validators)

    def __contains__(self, name: object) -> bool:
        return name in self._validators

    def run_all(self, tree: dict[str, Any]) -> tuple[bool, list[str]]:
        """Run every validator against the same snapshot of tree.

        A validator that raises, or returns anything but a ValidationResult,
        counts as a failure; the remaining validators still run.

        Args:
            tree: Fully merged configuration tree.

        Returns:
            Tuple of (all_passed, errors) where errors are formatted
            "[name] message" in registration order.

        """
        errors: list[str] = []
        for name, validator in self._validators.items():
            # Each validator gets its own copy so none can affect another
            snapshot = copy.deepcopy(tree)
            try:
                if isinstance(validator, Validator):
                    result = validator.validate(snapshot)
                else:
                    result = validator(snapshot)
            except Exception as e:
                logger.warning("Config validator '%s' raised: %s", name, e)
                errors.append(f"[{name}] validator raised {type(e).__name__}: {e}")
                continue

            if not isinstance(result, ValidationResult):
                logger.warning(
                    "Config validator '%s' returned %s instead of a ValidationResult",
                    name,
                    type(result).__name__,
                )
                errors.append(f"[{name}] validator returned {type(result).__name__}")
                continue

            if not result.passed:
                messages = result.errors or ["validation failed"]
                errors.extend(f"[{name}] {message}" for message in messages)

        return not errors, errors


class RequiredSectionsValidator:
    """Require a set of top-level sections to be present mappings."""

    def __init__(self, sections: Iterable[str] = ("monitor", "logs", "deploy")) -> None:
        """Initialize the validator.

        Args:
            sections: Top-level keys that must be present and hold mappings.

        """
        self.sections = tuple(sections)

    def validate(self, tree: dict[str, Any]) -> ValidationResult:
        """Check that every required section exists and is a mapping.

        Args:
            tree: Configuration tree to check.

        Returns:
            Result with one message per missing or malformed section.

        """
        errors = []
        for section in self.sections:
            if section not in tree:
                errors.append(f"missing required section '{section}'")
            elif not isinstance(tree[section], dict):
                errors.append(
                    f"section '{section}' must be a mapping, got {type(tree[section]).__name__}"
                )
        return ValidationResult(passed=not errors, errors=errors)


class SchemaValidator:
    """Validate a tree against a pydantic model.

    Validation runs in strict mode because the tree is stored as given:
    "10" for an int field or "yes" for a bool field is rejected instead of
    being coerced. Each pydantic error becomes one message of the form
    "loc.path: msg". Extra keys are accepted when the model allows them.
    """

    def __init__(self, model: type[BaseModel] = Config) -> None:
        """Initialize the validator.

        Args:
            model: Pydantic model the tree must satisfy.

        """
        self.model = model

    def validate(self, tree: dict[str, Any]) -> ValidationResult:
        """Validate tree against the model without type coercion.

        Args:
            tree: Configuration tree to check.

        Returns:
            Result with one "loc.path: msg" message per pydantic error.

        """
        try:
            self.model.model_validate(tree, strict=True)
        except ValidationError as e:
            return ValidationResult.fail(
                *(
                    f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
                    for err in e.errors()
                )
            )
        return ValidationResult.ok()


def default_validators() -> list[tuple[str, ValidatorLike]]:
    """Get the validators the CLI registers at startup, in run order."""
    return [
        ("required-sections", RequiredSectionsValidator()),
        ("schema", SchemaValidator()),
    ]
