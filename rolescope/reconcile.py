"""Field reconciliation & validation.

The upstream model does not spell keys consistently (`company` vs
`company_name`, `jobTitle` vs `job_title`, ...). Each canonical field owns an
ordered list of accepted keys; the first key present with a non-null value
wins. Precedence lives in one table so it can be audited and tested on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from .errors import MissingRequiredFieldError, SchemaViolationError
from .log import get_logger
from .models import JobPosting
from .utils import describe_shape, iso_timestamp

log = get_logger(__name__)


@dataclass(frozen=True)
class FieldRule:
    """Canonical (serialized) field name and the raw keys accepted for it, highest priority first."""

    name: str
    keys: Tuple[str, ...]
    required: bool = False
    sequence: bool = False

    def default(self) -> Any:
        return () if self.sequence else None


FIELD_RULES: Tuple[FieldRule, ...] = (
    FieldRule("company", ("company", "company_name"), required=True),
    FieldRule("jobTitle", ("jobTitle", "job_title"), required=True),
    FieldRule("location", ("location",)),
    FieldRule(
        "skills",
        ("skills", "skills_and_experiences", "skills_and_experiences_required"),
        sequence=True,
    ),
    FieldRule("responsibilities", ("responsibilities", "key_responsibilities"), sequence=True),
    FieldRule("qualifications", ("qualifications", "required_qualifications"), sequence=True),
    FieldRule("yearlyPay", ("yearlyPay", "yearly_pay", "salary")),
    FieldRule("benefits", ("benefits",), sequence=True),
    FieldRule("postingDate", ("postingDate", "posting_date")),
    FieldRule("sourceUrl", ("postSource", "source_url", "sourceUrl"), required=True),
)


def resolve_field(raw: Mapping[str, Any], keys: Sequence[str]) -> Any:
    """Return the value of the first key present in `raw` with a non-null value, else None."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _schema_violation(exc: ValidationError, values: Mapping[str, Any]) -> SchemaViolationError:
    err = exc.errors()[0]
    loc = err["loc"]
    field = str(loc[0]) if loc else "record"
    value = values.get(field)
    shape = describe_shape(value)
    if isinstance(value, (list, tuple)):
        if len(loc) > 1 and isinstance(loc[1], int) and loc[1] < len(value):
            index = loc[1]
        else:
            # whole-sequence validators report no index; point at the first non-string element
            index = next((i for i, item in enumerate(value) if describe_shape(item) != "string"), None)
        if index is not None:
            shape = f"array with {describe_shape(value[index])} at index {index}"
    return SchemaViolationError(field, shape, expected=err["msg"])


def reconcile_fields(
    raw: Mapping[str, Any],
    *,
    now: Optional[Callable[[], datetime]] = None,
) -> JobPosting:
    """Map `raw` onto the canonical schema and validate it.

    Args:
        raw: Parsed model output with no schema enforced.
        now: Optional clock used for `fetchDate`; defaults to the current UTC time.

    Returns:
        An immutable JobPosting.

    Raises:
        MissingRequiredFieldError: a required field matched none of its keys.
        SchemaViolationError: a resolved value has the wrong shape.
    """
    values: Dict[str, Any] = {}
    for rule in FIELD_RULES:
        value = resolve_field(raw, rule.keys)
        if value is None:
            if rule.required:
                raise MissingRequiredFieldError(rule.name, rule.keys)
            value = rule.default()
        values[rule.name] = value

    # never taken from input
    values["fetchDate"] = iso_timestamp(now)

    unknown = sorted(set(raw) - {key for rule in FIELD_RULES for key in rule.keys} - {"fetchDate"})
    if unknown:
        log.debug("Ignoring unrecognized keys: %s", ", ".join(unknown))

    try:
        return JobPosting.model_validate(values)
    except ValidationError as exc:
        raise _schema_violation(exc, values) from exc
