"""
CREATE3 Address Unit Tests
Tests for create4/deploy/create3.py
"""
import pytest
from pydantic import ValidationError

from fixtures import (
    SAMPLE_ADDRESS,
    SAMPLE_DEPLOYMENT_SALT,
    SAMPLE_FACTORY,
    SAMPLE_ROOT,
    ZERO_SALT,
)
from create4.crypto.hashing import from_hex, keccak256, to_hex
from create4.deploy.create3 import (
    KECCAK256_PROXY_CHILD_BYTECODE,
    PROXY_CHILD_BYTECODE,
    InMemoryCreate3Deployer,
    compute_create3_address,
    compute_plan_deployment,
    compute_proxy_address,
    derive_deployment_salt,
)
from create4.schemas.errors import (
    ContractCreationException,
    DeploymentException,
    EncodingException,
    ProxyCreationException,
    TargetOccupiedException,
)
from create4.schemas.plan import PlanDeployment


class TestConstants:
    """Tests for protocol constants."""

    def test_proxy_hash_matches_bytecode(self):
        assert keccak256(PROXY_CHILD_BYTECODE) == KECCAK256_PROXY_CHILD_BYTECODE

    def test_proxy_hash_value(self):
        assert to_hex(KECCAK256_PROXY_CHILD_BYTECODE) == (
            "0x21c35dbe1b344a2488cf3321d6ce542f8e9f305544ff09e4993a62319a497c1f"
        )


class TestAddressDerivation:
    """Tests for deployment salt and address formulas."""

    def test_reference_deployment_salt(self):
        assert to_hex(derive_deployment_salt(SAMPLE_ROOT, ZERO_SALT)) == SAMPLE_DEPLOYMENT_SALT

    def test_reference_address(self):
        assert compute_create3_address(SAMPLE_FACTORY, SAMPLE_DEPLOYMENT_SALT) == SAMPLE_ADDRESS

    def test_accepts_bytes(self):
        assert compute_create3_address(
            from_hex(SAMPLE_FACTORY), from_hex(SAMPLE_DEPLOYMENT_SALT)
        ) == SAMPLE_ADDRESS

    def test_two_stage_formula(self):
        salt = keccak256(b"salt")
        factory = from_hex(SAMPLE_FACTORY)
        proxy = keccak256(b"\xff" + factory + salt + KECCAK256_PROXY_CHILD_BYTECODE)[12:]

        assert compute_proxy_address(factory, salt) == to_hex(proxy)
        assert compute_create3_address(factory, salt) == to_hex(
            keccak256(b"\xd6\x94" + proxy + b"\x01")[12:]
        )

    def test_factory_changes_address(self):
        salt = keccak256(b"salt")
        assert compute_create3_address("0x" + "11" * 20, salt) != compute_create3_address(
            "0x" + "22" * 20, salt
        )

    def test_bad_factory_length(self):
        with pytest.raises(EncodingException, match="factory address"):
            compute_create3_address("0x1234", SAMPLE_DEPLOYMENT_SALT)

    def test_bad_salt_length(self):
        with pytest.raises(EncodingException, match="salt"):
            derive_deployment_salt(SAMPLE_ROOT, "0x00")


class TestComputePlanDeployment:
    """Tests for address computation from a plan spec."""

    def test_reference_vector(self, sample_spec):
        result = compute_plan_deployment(sample_spec, SAMPLE_FACTORY)

        assert result.to_json_dict() == {
            "factory": SAMPLE_FACTORY,
            "planRoot": SAMPLE_ROOT,
            "salt": ZERO_SALT,
            "deploymentSalt": SAMPLE_DEPLOYMENT_SALT,
            "address": SAMPLE_ADDRESS,
        }

    def test_factory_case_insensitive(self, sample_spec):
        upper = "0x" + "AB" * 20
        assert compute_plan_deployment(sample_spec, upper).factory == "0x" + "ab" * 20

    def test_salt_override(self, sample_spec):
        override = "0x" + "01" * 32
        result = compute_plan_deployment(sample_spec, SAMPLE_FACTORY, salt_override=override)

        assert result.salt == override
        assert result.address != SAMPLE_ADDRESS

    def test_spec_salt_used(self, sample_spec):
        sample_spec["salt"] = "0x" + "02" * 32
        result = compute_plan_deployment(sample_spec, SAMPLE_FACTORY)
        assert result.salt == "0x" + "02" * 32

    def test_invalid_factory(self, sample_spec):
        with pytest.raises(EncodingException, match="invalid address"):
            compute_plan_deployment(sample_spec, "0x1234")

    def test_invalid_salt_override(self, sample_spec):
        with pytest.raises(EncodingException, match="32-byte hex value"):
            compute_plan_deployment(sample_spec, SAMPLE_FACTORY, salt_override="0x12")

    def test_model_lowercases_addresses(self):
        result = PlanDeployment(
            factory="0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
            plan_root=SAMPLE_ROOT,
            salt=ZERO_SALT,
            deployment_salt=SAMPLE_DEPLOYMENT_SALT,
            address=SAMPLE_ADDRESS.upper().replace("0X", "0x"),
        )
        assert result.factory == "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"
        assert result.address == SAMPLE_ADDRESS

    @pytest.mark.parametrize(
        "factory",
        ["0x" + "11" * 19, "11" * 20, "0x" + "11" * 10 + " " + "11" * 9 + "1"],
    )
    def test_model_rejects_malformed_address(self, factory):
        with pytest.raises(ValidationError, match="20-byte 0x-prefixed hex address"):
            PlanDeployment(
                factory=factory,
                plan_root=SAMPLE_ROOT,
                salt=ZERO_SALT,
                deployment_salt=SAMPLE_DEPLOYMENT_SALT,
                address=SAMPLE_ADDRESS,
            )


class TestInMemoryCreate3Deployer:
    """Tests for the reference deployment primitive."""

    def test_deploys_at_create3_address(self, deployer):
        salt = keccak256(b"s")
        address = deployer.deploy(salt, b"\x60\x00")

        assert address == compute_create3_address(deployer.factory, salt)
        assert deployer.code_at(address) == b"\x60\x00"

    def test_redeploy_is_target_occupied(self, deployer):
        salt = keccak256(b"s")
        deployer.deploy(salt, b"\x60\x00")
        with pytest.raises(TargetOccupiedException):
            deployer.deploy(salt, b"\x60\x01")

    def test_squatted_target(self, deployer):
        salt = keccak256(b"s")
        deployer.mark_occupied(deployer.get_address(salt))
        with pytest.raises(TargetOccupiedException, match="already occupied"):
            deployer.deploy(salt, b"\x60\x00")

    def test_used_proxy(self, deployer):
        salt = keccak256(b"s")
        deployer.deploy(salt, b"\x60\x00")
        # Contract self-destructed, proxy remains
        del deployer.deployed[deployer.get_address(salt)]
        with pytest.raises(ProxyCreationException):
            deployer.deploy(salt, b"\x60\x00")

    def test_empty_init_code(self, deployer):
        with pytest.raises(ContractCreationException) as exc:
            deployer.deploy(keccak256(b"s"), b"")
        assert isinstance(exc.value, DeploymentException)
        assert exc.value.code == "CONTRACT_CREATION_FAILED"

    def test_failed_creation_leaves_no_state(self, deployer):
        salt = keccak256(b"s")
        with pytest.raises(ContractCreationException):
            deployer.deploy(salt, b"")
        assert deployer.deploy(salt, b"\x60\x00") == deployer.get_address(salt)
