"""PDF layout options."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PageFormat = Literal["A4", "Letter"]
Orientation = Literal["portrait", "landscape"]

DEFAULT_MARGIN = "1cm"


class _Base(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Margins(_Base):
    """Page margins as CSS length strings."""

    top: str = DEFAULT_MARGIN
    right: str = DEFAULT_MARGIN
    bottom: str = DEFAULT_MARGIN
    left: str = DEFAULT_MARGIN

    def as_dict(self) -> dict[str, str]:
        return {"top": self.top, "right": self.right, "bottom": self.bottom, "left": self.left}


class RenderOptions(_Base):
    """Layout for one PDF render."""

    format: PageFormat = "A4"
    orientation: Orientation = "portrait"
    margins: Margins = Field(default_factory=Margins)
    scale: float = Field(default=1.0, ge=0.1, le=2.0)

    @property
    def landscape(self) -> bool:
        return self.orientation == "landscape"

    def merged(self, overrides: dict[str, Any] | None) -> RenderOptions:
        """Return a copy with caller-supplied fields layered on top."""
        if not overrides:
            return self
        data = self.model_dump()
        for key, value in overrides.items():
            name = _field_name(key)
            if name == "margins" and isinstance(value, dict):
                data["margins"] = {**data["margins"], **{_field_name(k): v for k, v in value.items()}}
            else:
                data[name] = value
        return RenderOptions.model_validate(data)


def _field_name(key: str) -> str:
    # Options arrive from JSON bodies in either casing.
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in key)


PRESETS: dict[str, RenderOptions] = {
    "document": RenderOptions(),
    "logs": RenderOptions(
        orientation="landscape",
        margins=Margins(top="15mm", right="10mm", bottom="15mm", left="10mm"),
    ),
}
