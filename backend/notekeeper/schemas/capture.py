"""Camera / gallery picker response schemas."""
from pydantic import Field

from notekeeper.schemas.base import CamelModel


class CapturedAsset(CamelModel):
    """One picked or photographed file."""

    uri: str | None = None
    file_name: str | None = None
    type: str | None = None


class CaptureResponse(CamelModel):
    """Picker result: cancelled, failed, or carrying the picked assets."""

    did_cancel: bool = False
    error_code: str | None = None
    error_message: str | None = None
    assets: list[CapturedAsset] = Field(default_factory=list)

    @property
    def source_uri(self) -> str | None:
        """URI of the first asset, or ``None`` when cancelled or failed."""
        if self.did_cancel or self.error_code:
            return None
        if not self.assets:
            return None
        return self.assets[0].uri or None
