"""Data models for RoleScope.

The key idea: the dataset owns a *stable* record shape regardless of how the
upstream model spells its keys on a given day. Attributes are snake_case; the
serialized keys are the camelCase names already present in stored JSONL files.

This file uses Pydantic v2.
"""

from __future__ import annotations

from typing import Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, field_validator
from pydantic.alias_generators import to_camel


class JobPosting(BaseModel):
    """A validated job posting record.

    Field order is the serialization order. Prefer adding new fields at the end
    rather than reordering once records are appended to a dataset.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
        extra="forbid",
    )

    company: StrictStr
    job_title: StrictStr
    location: Optional[StrictStr] = None

    skills: Tuple[StrictStr, ...] = ()
    responsibilities: Tuple[StrictStr, ...] = ()
    qualifications: Tuple[StrictStr, ...] = ()

    yearly_pay: Optional[Union[StrictInt, StrictFloat]] = Field(
        default=None,
        description="Yearly compensation in dollars when the posting lists one.",
    )
    benefits: Tuple[StrictStr, ...] = ()

    posting_date: Optional[StrictStr] = Field(
        default=None,
        description="Posting date (YYYY-MM-DD) as reported upstream; not re-parsed.",
    )
    fetch_date: StrictStr = Field(..., description="UTC timestamp stamped at validation time.")
    source_url: StrictStr = Field(..., description="URL of the job posting.")

    @field_validator(
        "company",
        "job_title",
        "location",
        "skills",
        "responsibilities",
        "qualifications",
        "benefits",
        "posting_date",
        "source_url",
    )
    @classmethod
    def check_utf8_encodable(cls, value):
        # json.loads accepts lone surrogate escapes such as "\ud800"; a JSONL line cannot hold them.
        items = value if isinstance(value, tuple) else (value,)
        for index, item in enumerate(items):
            if item is None:
                continue
            try:
                item.encode("utf-8")
            except UnicodeEncodeError:
                where = f" at index {index}" if isinstance(value, tuple) else ""
                raise ValueError(f"string{where} contains an unpaired surrogate") from None
        return value
