from typing import Any

from pydantic import BaseModel, ConfigDict


class OpenBody(BaseModel):
    """Request body that keeps unknown keys so the store can reject them by name."""
    model_config = ConfigDict(extra="allow")

    def supplied(self) -> dict[str, Any]:
        """Only the keys the client actually sent, extras included."""
        return {**self.model_dump(exclude_unset=True), **(self.model_extra or {})}
