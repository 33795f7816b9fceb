"""Raw model output -> one validated JSON-Lines record.

Stages run strictly in order and each consumes the previous one's full output:

    strip_code_fences -> slice_object -> parse_lenient -> reconcile_fields

Any stage failure propagates as a RoleScopeError and nothing is emitted.
Identical input yields identical records except for `fetchDate`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from .log import get_logger
from .models import JobPosting
from .normalize import parse_lenient, slice_object, strip_code_fences
from .reconcile import reconcile_fields

log = get_logger(__name__)


def extract_job_posting(raw_text: str, *, now: Optional[Callable[[], datetime]] = None) -> JobPosting:
    """Run the full pipeline on one piece of model output."""
    text = strip_code_fences(raw_text or "")
    span = slice_object(text)
    raw = parse_lenient(span)
    record = reconcile_fields(raw, now=now)
    log.info("Extracted %s @ %s", record.job_title, record.company)
    return record


def to_jsonl(record: JobPosting) -> str:
    """Serialize one record as a single JSON line (trailing newline included)."""
    return record.model_dump_json(by_alias=True) + "\n"


def process(raw_text: str, *, now: Optional[Callable[[], datetime]] = None) -> str:
    return to_jsonl(extract_job_posting(raw_text, now=now))
