"""Checkout validation entry point: untyped record in, CheckoutRequest or field-error tree out."""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError
from pydantic_core import ErrorDetails

from .messages import format_message
from .schema import CheckoutRequest

logger = logging.getLogger(__name__)

FieldPath = tuple[Union[str, int], ...]


@dataclass(frozen=True)
class FieldViolation:
    """A single rule failure at one field path."""
    path: FieldPath
    rule: str
    message: str

    @property
    def dotted_path(self) -> str:
        return ".".join(str(part) for part in self.path)

    def to_dict(self) -> dict:
        return {
            "path": self.dotted_path,
            "rule": self.rule,
            "message": self.message,
        }


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validation pass: either ``value`` or ``violations`` is populated."""
    value: Optional[CheckoutRequest] = None
    violations: tuple[FieldViolation, ...] = ()

    @property
    def ok(self) -> bool:
        return self.value is not None

    def errors(self) -> dict:
        """
        Nested error tree mirroring the input shape.

        Every node carries an ``_errors`` list; array elements are keyed by
        their index as a string. Violations with an empty path land in the
        root ``_errors``.
        """
        tree: dict = {"_errors": []}
        for violation in self.violations:
            node = tree
            for part in violation.path:
                node = node.setdefault(str(part), {"_errors": []})
            node["_errors"].append(violation.message)
        return tree

    def flatten(self) -> dict[str, list[str]]:
        """Messages keyed by dotted field path (root violations under ``""``)."""
        flat: dict[str, list[str]] = {}
        for violation in self.violations:
            flat.setdefault(violation.dotted_path, []).append(violation.message)
        return flat


def _to_violation(error: ErrorDetails) -> FieldViolation:
    return FieldViolation(
        path=tuple(error["loc"]),
        rule=error["type"],
        message=format_message(error),
    )


class CheckoutValidator:
    """
    Stateless checkout validator.

    ``clock`` supplies the reference date for the card-expiry rule; pass a
    fixed callable (or ``today=`` per call) for deterministic results.
    Invalid input never raises: it comes back as a ``ValidationResult``
    carrying the violations.
    """

    def __init__(self, clock: Callable[[], date] = date.today):
        self._clock = clock

    def validate(self, data: Any, today: Optional[date] = None) -> ValidationResult:
        """Validate an already-decoded record (normally a dict from a JSON body)."""
        context = {"today": today or self._clock()}
        try:
            request = CheckoutRequest.model_validate(data, context=context)
        except ValidationError as e:
            return self._reject(e)
        return ValidationResult(value=request)

    def validate_json(self, raw: Union[str, bytes], today: Optional[date] = None) -> ValidationResult:
        """Validate a raw JSON document; malformed JSON is a root violation."""
        context = {"today": today or self._clock()}
        try:
            request = CheckoutRequest.model_validate_json(raw, context=context)
        except ValidationError as e:
            return self._reject(e)
        return ValidationResult(value=request)

    def _reject(self, error: ValidationError) -> ValidationResult:
        violations = tuple(_to_violation(err) for err in error.errors(include_url=False))
        logger.debug(
            "Checkout rejected with %d violation(s): %s",
            len(violations),
            ", ".join(sorted({v.rule for v in violations})),
        )
        return ValidationResult(violations=violations)


_default_validator = CheckoutValidator()


def validate_checkout(data: Any, today: Optional[date] = None) -> ValidationResult:
    """Validate with the system clock unless ``today`` is given."""
    return _default_validator.validate(data, today=today)
