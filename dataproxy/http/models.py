"""Entity base model for resources served through a data proxy."""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

KeyT = TypeVar("KeyT")


class DomainObject(BaseModel, Generic[KeyT]):
    """An entity identified by ``ID``.

    The proxy never looks at any other field: it only needs the identifier
    to address an existing item (``PUT base/{ID}``). Unknown fields sent by
    the server are kept on the instance.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    ID: Optional[KeyT] = None
