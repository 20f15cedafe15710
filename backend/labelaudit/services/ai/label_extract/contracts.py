"""Label extract scope contracts — shipment record parsed from a label photo."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class InspectionItem(BaseModel):
    """One inspected device line.

    Empty strings mean "unreadable, not guessed"; placeholders are never used.
    """

    model_config = ConfigDict(frozen=True)

    model: str
    gb: str
    pcs: int = Field(ge=0)
    color: str
    coo: str
    spec: str
    remarks: str


class ExtractedData(BaseModel):
    """Overall extraction result. ``items`` keeps the order found on the label."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    company: str | None = None
    customer_code: str | None = Field(default=None, alias="customerCode")
    items: tuple[InspectionItem, ...]

    @classmethod
    def empty(cls) -> ExtractedData:
        return cls(items=())

    def to_response_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


_ITEM_FIELDS = ("model", "gb", "pcs", "color", "coo", "spec", "remarks")

# Structured-output schema sent with every request (Gemini ``Schema`` format).
RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "company": {"type": "STRING"},
        "customerCode": {"type": "STRING"},
        "items": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "model": {"type": "STRING"},
                    "gb": {"type": "STRING"},
                    "pcs": {"type": "INTEGER"},
                    "color": {"type": "STRING"},
                    "coo": {"type": "STRING"},
                    "spec": {"type": "STRING"},
                    "remarks": {"type": "STRING"},
                },
                "required": list(_ITEM_FIELDS),
            },
        },
    },
    "required": ["items"],
}
