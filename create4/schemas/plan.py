"""
Schemas & Plan Models
File: plan.py

Defines the JSON shapes exchanged with plan authors and tooling:
- PlanSpec: the author-supplied input (chains, fallback init code, salt, metadata)
- LeafRecord / DeploymentPlan: a built plan with per-leaf proofs
- ChainProof: the proof query result for one chain id
- PlanDeployment: the address computation result

All models serialize with camelCase keys. Chain ids are decimal strings and
every byte field is lowercase 0x-prefixed hex.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from eth_utils import is_hex_address, to_normalized_address
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from .errors import PlanValidationException


# Regex pattern for validating hex strings (0x followed by 64 hex chars = 32 bytes)
HEX_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")
HEX_BYTES_PATTERN = re.compile(r"^0x(?:[0-9a-fA-F]{2})+$")
DECIMAL_STRING_PATTERN = re.compile(r"^(?:0|[1-9][0-9]*)$")


def validate_hex_hash(value: str, field_name: str) -> str:
    """Validate that a value is a valid 32-byte hex hash with 0x prefix."""
    if not HEX_HASH_PATTERN.match(value):
        shown = f"{value[:20]}..." if len(value) > 20 else value
        raise ValueError(
            f"{field_name} must be a valid 32-byte hex string with 0x prefix "
            f"(64 hex chars), got: {shown}"
        )
    return value.lower()


def validate_decimal_chain_id(value: str, field_name: str) -> str:
    """Validate a canonical decimal chain id (no sign, no leading zeros)."""
    if not DECIMAL_STRING_PATTERN.match(value):
        raise ValueError(f"{field_name} must be a canonical decimal string, got: {value!r}")
    return value


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump with camelCase keys, dropping absent optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Input spec
# =============================================================================


class ChainEntrySpec(BaseModel):
    """
    One author-supplied chain entry.

    Values are kept as given; the plan assembler normalizes and validates
    them so that errors carry the entry index and chain id.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    chain_id: Any = None
    init_code: Any = None
    label: Optional[str] = None


class PlanSpec(BaseModel):
    """Author-supplied plan input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    salt: Optional[str] = None
    chains: list[ChainEntrySpec] = Field(default_factory=list)
    fallback_init_code: Any = None
    name: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None

    @classmethod
    def from_input(cls, data: Any) -> "PlanSpec":
        """
        Parse a decoded JSON value into a PlanSpec.

        Raises:
            PlanValidationException: data is not an object or has the wrong shape
        """
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            raise PlanValidationException("Plan spec must be a JSON object")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise PlanValidationException(
                f"Invalid plan spec: {e.error_count()} error(s)",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e

    def metadata(self) -> dict[str, str]:
        """Return the name/description/version fields that are set."""
        return {
            key: value
            for key, value in (
                ("name", self.name),
                ("description", self.description),
                ("version", self.version),
            )
            if value
        }


# =============================================================================
# Plan output
# =============================================================================


class LeafRecord(_CamelModel):
    """A serialized leaf with its inclusion proof."""

    chain_id: str = Field(..., description="Decimal chain id ('0' for the fallback)")
    next_chain_id: str = Field(..., description="Decimal successor chain id")
    label: Optional[str] = Field(default=None)
    init_code: str = Field(..., description="Init code (0x-prefixed hex)")
    init_code_hash: str
    prefix: str = Field(..., description="Packed 32-byte leaf prefix")
    leaf_hash: str
    proof: list[str] = Field(default_factory=list)

    @field_validator("chain_id", "next_chain_id")
    @classmethod
    def validate_chain_ids(cls, v: str, info: ValidationInfo) -> str:
        return validate_decimal_chain_id(v, info.field_name)

    @field_validator("init_code")
    @classmethod
    def validate_init_code(cls, v: str) -> str:
        if not HEX_BYTES_PATTERN.match(v):
            raise ValueError("init_code must be non-empty 0x-prefixed hex")
        return v.lower()

    @field_validator("init_code_hash", "prefix", "leaf_hash")
    @classmethod
    def validate_hashes(cls, v: str, info: ValidationInfo) -> str:
        return validate_hex_hash(v, info.field_name)

    @field_validator("proof")
    @classmethod
    def validate_proof(cls, v: list[str]) -> list[str]:
        return [validate_hex_hash(item, "proof element") for item in v]


class DeploymentPlan(_CamelModel):
    """
    A built deployment plan.

    The root commits to every chain leaf plus the fallback leaf; leaves are
    listed in ascending chain id order.
    """

    root: str
    salt: str
    leaves: list[LeafRecord]
    fallback: LeafRecord
    name: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None

    @field_validator("root", "salt")
    @classmethod
    def validate_root_and_salt(cls, v: str, info: ValidationInfo) -> str:
        return validate_hex_hash(v, info.field_name)


class ChainProof(_CamelModel):
    """Proof query result for a single chain id."""

    root: str
    chain_id: str
    next_chain_id: str
    prefix: str
    init_code: str
    init_code_hash: str
    leaf_hash: str
    proof: list[str]
    salt: str


class PlanDeployment(_CamelModel):
    """Address computation result."""

    factory: str
    plan_root: str
    salt: str
    deployment_salt: str
    address: str

    @field_validator("factory", "address")
    @classmethod
    def validate_addresses(cls, v: str, info: ValidationInfo) -> str:
        if not v.startswith("0x") or not is_hex_address(v):
            raise ValueError(f"{info.field_name} must be a 20-byte 0x-prefixed hex address")
        return to_normalized_address(v)

    @field_validator("plan_root", "salt", "deployment_salt")
    @classmethod
    def validate_hashes(cls, v: str, info: ValidationInfo) -> str:
        return validate_hex_hash(v, info.field_name)


__all__ = [
    "validate_hex_hash",
    "ChainEntrySpec",
    "PlanSpec",
    "LeafRecord",
    "DeploymentPlan",
    "ChainProof",
    "PlanDeployment",
]
