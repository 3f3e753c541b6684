"""Golden record set data structures."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from golden_store.errors import ParseError

# Top-level key that carries the report link rather than a page record
DIFF_REPORT_URL_KEY = "diffReportUrl"

# PageRecord accepts field names in code, but only these keys on disk
PAGE_WIRE_KEYS = frozenset({"publicUrl", "screenshots"})


class PageRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    public_url: str = Field(min_length=1)
    screenshots: dict[str, str] = Field(default_factory=dict)  # variant alias -> screenshot URL


class GoldenRecordSet(BaseModel):
    """In-memory form of a golden file.

    On disk the pages and the report link share one flat JSON object: every
    key except ``diffReportUrl`` is a page key.
    """

    pages: dict[str, PageRecord] = Field(default_factory=dict)
    diff_report_url: Optional[str] = None

    @classmethod
    def from_json_data(cls, data: Any) -> "GoldenRecordSet":
        """Validate a decoded golden file and build a record set from it."""
        if not isinstance(data, dict):
            raise ParseError(
                f"Golden file must contain a JSON object, got {type(data).__name__}"
            )
        pages = dict(data)
        diff_report_url = pages.pop(DIFF_REPORT_URL_KEY, None)
        for page_key, page in pages.items():
            if isinstance(page, dict) and not set(page) <= PAGE_WIRE_KEYS:
                unexpected = ", ".join(sorted(set(page) - PAGE_WIRE_KEYS))
                raise ParseError(f"Malformed golden file: page {page_key!r} has unexpected keys: {unexpected}")
        try:
            return cls(pages=pages, diff_report_url=diff_report_url)
        except ValidationError as e:
            raise ParseError(f"Malformed golden file: {e}") from e

    def to_json_data(self) -> dict[str, Any]:
        """Return the flat mapping written to disk."""
        data: dict[str, Any] = {
            page_key: record.model_dump(by_alias=True)
            for page_key, record in self.pages.items()
        }
        if self.diff_report_url is not None:
            data[DIFF_REPORT_URL_KEY] = self.diff_report_url
        return data
