"""
CREATE3 Address Derivation

A CREATE3 deployment goes through a throwaway proxy: the factory CREATE2s a
fixed proxy under the deployment salt, and the proxy CREATEs the real
contract with nonce 1. The final address therefore depends only on the
factory address and the salt, never on the init code.

    proxy   = keccak256(0xff ‖ factory ‖ salt ‖ keccak256(PROXY_CHILD_BYTECODE))[12:]
    address = keccak256(0xd6 ‖ 0x94 ‖ proxy ‖ 0x01)[12:]

For a deployment plan, salt = keccak256(root ‖ userSalt).
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Union

from create4.crypto.hashing import as_bytes, from_hex, hash_pair, keccak256, to_hex
from create4.plan.builder import build_plan_from_spec
from create4.schemas.encoding import normalize_address, normalize_salt_hex
from create4.schemas.errors import (
    ContractCreationException,
    ProxyCreationException,
    TargetOccupiedException,
)
from create4.schemas.plan import PlanDeployment


logger = logging.getLogger(__name__)

BytesLike = Union[bytes, str]

# Proxy that CREATEs whatever calldata it receives and returns the result.
PROXY_CHILD_BYTECODE: bytes = bytes.fromhex("67363d3d37363d34f03d5260086018f3")

KECCAK256_PROXY_CHILD_BYTECODE: bytes = bytes.fromhex(
    "21c35dbe1b344a2488cf3321d6ce542f8e9f305544ff09e4993a62319a497c1f"
)

_CREATE2_PREFIX = b"\xff"
# RLP list header for [20-byte address, nonce 1]
_RLP_PROXY_PREFIX = b"\xd6\x94"
_PROXY_NONCE = b"\x01"


def derive_deployment_salt(root: BytesLike, salt: BytesLike) -> bytes:
    """deploymentSalt = keccak256(root ‖ salt)."""
    return hash_pair(as_bytes(root, 32, "root"), as_bytes(salt, 32, "salt"))


def compute_proxy_address(factory: BytesLike, deployment_salt: BytesLike) -> str:
    """Address of the CREATE2 proxy for (factory, salt)."""
    factory_bytes = as_bytes(factory, 20, "factory address")
    salt_bytes = as_bytes(deployment_salt, 32, "deployment salt")
    digest = keccak256(
        _CREATE2_PREFIX + factory_bytes + salt_bytes + KECCAK256_PROXY_CHILD_BYTECODE
    )
    return to_hex(digest[12:])


def compute_create3_address(factory: BytesLike, deployment_salt: BytesLike) -> str:
    """
    Compute the CREATE3 address for a factory and deployment salt.

    Returns:
        Lowercase 0x-prefixed 20-byte address
    """
    proxy = from_hex(compute_proxy_address(factory, deployment_salt), 20, "proxy address")
    digest = keccak256(_RLP_PROXY_PREFIX + proxy + _PROXY_NONCE)
    return to_hex(digest[12:])


def compute_plan_deployment(
    spec: Any,
    factory: str,
    salt_override: Optional[str] = None,
) -> PlanDeployment:
    """
    Compute the deterministic address of a plan for a factory.

    The salt is the override when given, else the plan spec's salt, else zero.
    """
    factory_hex = normalize_address(factory)
    plan = build_plan_from_spec(spec)
    salt = normalize_salt_hex(salt_override) if salt_override is not None else plan.salt
    deployment_salt = derive_deployment_salt(plan.root, salt)

    return PlanDeployment(
        factory=factory_hex,
        plan_root=plan.root,
        salt=salt,
        deployment_salt=to_hex(deployment_salt),
        address=compute_create3_address(factory_hex, deployment_salt),
    )


# =============================================================================
# Deployment primitive
# =============================================================================


class DeploymentPrimitive(Protocol):
    """
    The CREATE3 capability a verifying factory delegates to.

    Implementations must place init_code at compute_create3_address(factory, salt)
    or raise a DeploymentException subclass.
    """

    def deploy(self, salt: bytes, init_code: bytes) -> str:
        ...

    def get_address(self, salt: bytes) -> str:
        ...


class InMemoryCreate3Deployer:
    """
    Reference deployment primitive that records deployments in memory.

    Follows the CREATE3 address contract exactly; useful for simulations and
    tests of the factory trust model.
    """

    def __init__(self, factory: str) -> None:
        self.factory = normalize_address(factory)
        self.deployed: dict[str, bytes] = {}
        self._used_proxies: set[str] = set()

    def get_address(self, salt: bytes) -> str:
        return compute_create3_address(self.factory, salt)

    def mark_occupied(self, address: str, code: bytes = b"\x00") -> None:
        """Place code at an address outside of deploy(), e.g. a squatter."""
        self.deployed[normalize_address(address)] = code

    def deploy(self, salt: bytes, init_code: bytes) -> str:
        address = self.get_address(salt)
        proxy = compute_proxy_address(self.factory, salt)

        if address in self.deployed:
            raise TargetOccupiedException(address)
        if proxy in self._used_proxies:
            raise ProxyCreationException(proxy)
        if not init_code:
            raise ContractCreationException(address, "init code produced no runtime code")

        self._used_proxies.add(proxy)
        self.deployed[address] = bytes(init_code)
        logger.debug(f"Deployed {len(init_code)} bytes of init code at {address}")
        return address

    def code_at(self, address: str) -> Optional[bytes]:
        return self.deployed.get(normalize_address(address))


__all__ = [
    "PROXY_CHILD_BYTECODE",
    "KECCAK256_PROXY_CHILD_BYTECODE",
    "derive_deployment_salt",
    "compute_proxy_address",
    "compute_create3_address",
    "compute_plan_deployment",
    "DeploymentPrimitive",
    "InMemoryCreate3Deployer",
]
