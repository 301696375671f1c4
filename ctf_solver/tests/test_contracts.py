"""
Tests for contract address and artifact resolution
"""

import json

import pytest

from ..config import HARDHAT_CHAIN_ID, Config
from ..contracts import ContractNotConfiguredError, ContractRegistry

NFT_FLAGS = "0x5fbdb2315678afecb367f032d93f642f64180aa3"


@pytest.fixture
def registry(tmp_path):
    deployments = {
        str(HARDHAT_CHAIN_ID): {
            "NFTFlags": {"address": NFT_FLAGS, "abi": []},
            "Challenge9": NFT_FLAGS,
        }
    }
    deployments_file = tmp_path / "deployments.json"
    deployments_file.write_text(json.dumps(deployments))

    artifact_dir = tmp_path / "artifacts" / "C11Factory.sol"
    artifact_dir.mkdir(parents=True)
    (artifact_dir / "C11Factory.json").write_text(json.dumps({
        "contractName": "C11Factory",
        "abi": [{"type": "function", "name": "deploy", "inputs": [], "outputs": []}],
        "bytecode": "0x6080604052",
    }))
    empty_dir = tmp_path / "artifacts" / "Empty.sol"
    empty_dir.mkdir()
    (empty_dir / "Empty.json").write_text(json.dumps({"abi": [], "bytecode": "0x"}))

    config = Config(
        local=True,
        deployments_file=str(deployments_file),
        artifacts_dir=str(tmp_path / "artifacts"),
    )
    return ContractRegistry(config)


def test_address_from_deployments_is_checksummed(registry):
    assert registry.address("NFTFlags") == "0x5FbDB2315678afecb367f032d93F642f64180aa3"
    assert registry.address("Challenge9") == "0x5FbDB2315678afecb367f032d93F642f64180aa3"


def test_fixed_addresses_take_precedence(registry):
    assert registry.address("Challenge1") == "0x9fE46736679d2D9a65F0992F2272dE9f3c7fa6e0"


def test_missing_address(registry):
    with pytest.raises(ContractNotConfiguredError):
        registry.address("Challenge12")


def test_missing_deployments_file(tmp_path):
    registry = ContractRegistry(Config(local=True, deployments_file=str(tmp_path / "nope.json")))

    with pytest.raises(ContractNotConfiguredError):
        registry.address("NFTFlags")


def test_abi_lookup(registry):
    names = {entry["name"] for entry in registry.abi("Challenge12")}
    assert names == {"preMintFlag", "mintFlag", "blockNumber"}

    with pytest.raises(ContractNotConfiguredError):
        registry.abi("Challenge99")


def test_load_artifact(registry):
    artifact = registry.load_artifact("C11Factory")

    assert artifact.name == "C11Factory"
    assert artifact.bytecode == "0x6080604052"
    assert artifact.abi[0]["name"] == "deploy"


def test_artifact_errors(registry):
    with pytest.raises(ContractNotConfiguredError):
        registry.load_artifact("C11Caller")
    with pytest.raises(ContractNotConfiguredError):
        registry.load_artifact("Empty")
