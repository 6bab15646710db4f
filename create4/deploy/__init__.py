"""
CREATE3 address derivation and the verifying factory.

Usage:
    from create4.deploy import Create4Factory, InMemoryCreate3Deployer

    factory = Create4Factory(chain_id=1, primitive=InMemoryCreate3Deployer(addr))
    deployed = factory.deploy(proof, init_code, next_chain_id, salt)
"""
from .create3 import (
    PROXY_CHILD_BYTECODE,
    KECCAK256_PROXY_CHILD_BYTECODE,
    derive_deployment_salt,
    compute_proxy_address,
    compute_create3_address,
    compute_plan_deployment,
    DeploymentPrimitive,
    InMemoryCreate3Deployer,
)
from .factory import Create4Factory


__all__ = [
    "PROXY_CHILD_BYTECODE",
    "KECCAK256_PROXY_CHILD_BYTECODE",
    "derive_deployment_salt",
    "compute_proxy_address",
    "compute_create3_address",
    "compute_plan_deployment",
    "DeploymentPrimitive",
    "InMemoryCreate3Deployer",
    "Create4Factory",
]
