"""Catalog models."""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """A raw document as returned by a document store."""

    id: str
    data: Dict[str, Any] = {}


class MenuItem(BaseModel):
    """Menu item read from a menu document.

    Known fields are exposed as attributes; any other document fields are
    kept verbatim as extras. Defaults for absent fields are applied at render
    time, never written back here. Only ``name`` and ``price`` are checked;
    the display flags, category and image are kept exactly as stored.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    id: str
    name: str
    price: Optional[float] = None
    is_available: Any = Field(default=None, alias="isAvailable")
    is_new: Any = Field(default=None, alias="isNew")
    is_popular: Any = Field(default=None, alias="isPopular")
    category: Any = None
    image: Any = None

    @classmethod
    def from_document(cls, document: Document) -> "MenuItem":
        """Build an item from a document; the document id is authoritative."""
        return cls.model_validate({**document.data, "id": document.id})

    @property
    def is_unavailable(self) -> bool:
        # Only an explicit False marks an item unavailable; 0, "false" and "no" do not
        return self.is_available is False
