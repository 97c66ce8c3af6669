"""
Asset Request Schemas

Pydantic models for the batches accepted by the CIP68 lifecycle operations.
"""

from typing import Any, Iterable

from pydantic import BaseModel, Field, field_validator

from .datum import OWNER_FIELD, owner_bytes


class AssetRequest(BaseModel):
    """One unit of mint, burn or update work"""

    asset_name: str = Field(min_length=1, description="Logical asset name (UTF-8, without CIP68 label)")
    metadata: dict[str, str] = Field(default_factory=dict, description="Reference datum metadata")
    quantity: str = Field("1", description="Signed integer quantity (as string for large numbers)")
    receiver: str | None = Field(None, description="User token receiver, defaults to the caller")
    tx_hash: str | None = Field(None, description="Transaction that created the current reference UTxO")

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, value: str) -> str:
        try:
            int(value)
        except ValueError:
            raise ValueError(f"quantity must be a signed integer string, got {value!r}")
        return value

    @field_validator("metadata")
    @classmethod
    def validate_owner(cls, value: dict[str, str]) -> dict[str, str]:
        if OWNER_FIELD in value:
            owner_bytes(value[OWNER_FIELD])
        return value

    @property
    def quantity_value(self) -> int:
        return int(self.quantity)


def coerce_batch(batch: Iterable[Any]) -> list[AssetRequest]:
    """
    Validate a batch of requests given as models or plain dictionaries

    Raises:
        ValueError: If the batch is empty
        pydantic.ValidationError: If a request is invalid
        InvalidHexInput: If an owner field is not lowercase hex
    """
    requests = [item if isinstance(item, AssetRequest) else AssetRequest.model_validate(item) for item in batch]
    if not requests:
        raise ValueError("Batch must contain at least one asset request")
    return requests
