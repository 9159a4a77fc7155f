"""Logical storage addresses and the predefined slots."""
from pydantic import BaseModel, ConfigDict, Field, field_validator

HIDDEN_DIR = "Android/syskit"
SLOT_NAME_LEGACY = ".sysdata"
SLOT_NAME_MODERN = "sysdata"


class StorageAddress(BaseModel):
    """A {directory, slot name} pair identifying where a payload lives."""
    model_config = ConfigDict(frozen=True)

    directory: str = Field(..., description="Slash-separated directory path.")
    slot_name: str = Field(..., description="File or display name of the slot.")

    @field_validator("slot_name")
    @classmethod
    def validate_slot_name(cls, v: str) -> str:
        if not v or "/" in v:
            raise ValueError(f"Invalid slot name: '{v}'")
        return v

    @property
    def parts(self):
        """Directory components, ignoring empty segments."""
        return [p for p in self.directory.split("/") if p]

    @property
    def normalized_directory(self) -> str:
        """Directory with exactly one trailing slash, as catalogs index it."""
        if not self.parts:
            return ""
        return "/".join(self.parts) + "/"

    def __str__(self):
        return f"{self.normalized_directory}{self.slot_name}"


HIDDEN_ADDRESS_LEGACY = StorageAddress(directory=HIDDEN_DIR, slot_name=SLOT_NAME_LEGACY)
HIDDEN_ADDRESS_MODERN = StorageAddress(directory=f"Documents/{HIDDEN_DIR}/", slot_name=SLOT_NAME_MODERN)
GENERIC_ADDRESS = StorageAddress(directory="Documents/", slot_name=SLOT_NAME_MODERN)
