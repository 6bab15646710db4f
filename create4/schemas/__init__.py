"""
Schemas for deployment plans: error taxonomy, input-boundary encoding,
and the pydantic models for plan inputs and outputs.
"""
from .errors import (
    ErrorCodes,
    Create4Error,
    Create4Exception,
    PlanValidationException,
    EncodingException,
    GapException,
    ProofConsistencyException,
    DeploymentException,
    TargetOccupiedException,
    ProxyCreationException,
    ContractCreationException,
)
from .encoding import (
    UINT64_MAX,
    ZERO_SALT,
    normalize_chain_id,
    chain_id_to_json,
    sort_chains_by_id,
    normalize_hex_string,
    normalize_bytecode,
    bytecode_to_bytes,
    normalize_salt_hex,
    get_salt_hex,
    normalize_address,
)
from .plan import (
    ChainEntrySpec,
    PlanSpec,
    LeafRecord,
    DeploymentPlan,
    ChainProof,
    PlanDeployment,
)

__all__ = [
    # Errors
    "ErrorCodes",
    "Create4Error",
    "Create4Exception",
    "PlanValidationException",
    "EncodingException",
    "GapException",
    "ProofConsistencyException",
    "DeploymentException",
    "TargetOccupiedException",
    "ProxyCreationException",
    "ContractCreationException",
    # Encoding
    "UINT64_MAX",
    "ZERO_SALT",
    "normalize_chain_id",
    "chain_id_to_json",
    "sort_chains_by_id",
    "normalize_hex_string",
    "normalize_bytecode",
    "bytecode_to_bytes",
    "normalize_salt_hex",
    "get_salt_hex",
    "normalize_address",
    # Models
    "ChainEntrySpec",
    "PlanSpec",
    "LeafRecord",
    "DeploymentPlan",
    "ChainProof",
    "PlanDeployment",
]
