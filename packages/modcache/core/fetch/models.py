"""Models returned by the module fetcher."""

from typing import Literal

from pydantic import BaseModel, ConfigDict


class LoadResponse(BaseModel):
    """
    Content resolved for a specifier.

    ``specifier`` is the final URL after redirects, which can differ from
    the one requested. Local files carry no headers.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["module"] = "module"
    specifier: str
    headers: dict[str, str] | None = None
    content: bytes

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    @property
    def content_type(self) -> str | None:
        if self.headers is None:
            return None
        return self.headers.get("content-type")
