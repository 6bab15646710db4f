"""
Schemas & Errors
File: errors.py

Purpose: Standard error taxonomy for deployment plans.
Defines both a Pydantic model for structured error communication
and Python exceptions for control flow.

No error in this taxonomy is retryable: every failure is terminal for the
operation and the caller must correct its input.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Plan assembly
    PLAN_VALIDATION_ERROR = "PLAN_VALIDATION_ERROR"

    # Hex / fixed-width field decoding
    ENCODING_ERROR = "ENCODING_ERROR"

    # Fallback eligibility
    CHAIN_NOT_IN_GAP = "CHAIN_NOT_IN_GAP"

    # Dual-fold check on the fallback path
    PROOF_CONSISTENCY_ERROR = "PROOF_CONSISTENCY_ERROR"

    # Deployment primitive (propagated verbatim)
    TARGET_OCCUPIED = "TARGET_OCCUPIED"
    PROXY_CREATION_FAILED = "PROXY_CREATION_FAILED"
    CONTRACT_CREATION_FAILED = "CONTRACT_CREATION_FAILED"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class Create4Error(BaseModel):
    """
    Error model for structured error reporting (CLI debug logs, reports).
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.PLAN_VALIDATION_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details (chain id, leaf index, ...)",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "Create4Exception":
        """Convert this error model to a raised exception."""
        return Create4Exception(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class Create4Exception(Exception):
    """
    Base exception for all deployment plan errors.

    Carries structured error information and can be converted to a
    Create4Error model.
    """

    def __init__(
        self,
        message: str,
        code: str = "CREATE4_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> Create4Error:
        """Convert this exception to a Create4Error model."""
        return Create4Error(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class PlanValidationException(Create4Exception, ValueError):
    """Raised when chain entries or the fallback cannot form a valid plan."""

    def __init__(
        self,
        message: str,
        chain_id: int | None = None,
        entry_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if chain_id is not None:
            full_details["chain_id"] = str(chain_id)
        if entry_index is not None:
            full_details["entry_index"] = entry_index
        super().__init__(
            message=message,
            code=ErrorCodes.PLAN_VALIDATION_ERROR,
            details=full_details,
            retryable=False,
        )


class EncodingException(Create4Exception, ValueError):
    """Raised for malformed hex or a wrong byte length in a fixed-width field."""

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_name:
            full_details["field"] = field_name
        super().__init__(
            message=message,
            code=ErrorCodes.ENCODING_ERROR,
            details=full_details,
            retryable=False,
        )


class GapException(Create4Exception):
    """Raised when a target chain id may not use the fallback for a given leaf."""

    def __init__(
        self,
        message: str,
        chain_id: int,
        next_chain_id: int,
        target_chain_id: int,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CHAIN_NOT_IN_GAP,
            details={
                "chain_id": str(chain_id),
                "next_chain_id": str(next_chain_id),
                "target_chain_id": str(target_chain_id),
            },
            retryable=False,
        )


class ProofConsistencyException(Create4Exception):
    """Raised when the gap leaf and the fallback leaf do not fold to one node."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_CONSISTENCY_ERROR,
            details=details,
            retryable=False,
        )


class DeploymentException(Create4Exception):
    """Base for failures reported by the deterministic-deployment primitive."""


class TargetOccupiedException(DeploymentException):
    """The derived contract address already holds code."""

    def __init__(self, address: str) -> None:
        super().__init__(
            message=f"target address already occupied: {address}",
            code=ErrorCodes.TARGET_OCCUPIED,
            details={"address": address},
        )


class ProxyCreationException(DeploymentException):
    """The first-stage proxy could not be created (salt already consumed)."""

    def __init__(self, proxy_address: str) -> None:
        super().__init__(
            message=f"proxy creation failed at {proxy_address}",
            code=ErrorCodes.PROXY_CREATION_FAILED,
            details={"proxy_address": proxy_address},
        )


class ContractCreationException(DeploymentException):
    """The proxy ran the init code but no contract code was produced."""

    def __init__(self, address: str, reason: str = "initialization failed") -> None:
        super().__init__(
            message=f"contract creation failed at {address}: {reason}",
            code=ErrorCodes.CONTRACT_CREATION_FAILED,
            details={"address": address, "reason": reason},
        )
