"""
Tests for CREATE2 prediction and salt grinding
"""

import pytest
from eth_utils import keccak

from ..create2 import SaltNotFoundError, create2_address, find_salt, last_byte_matches

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
ZERO_SALT = "0x" + "00" * 32


@pytest.mark.parametrize("deployer,expected", [
    (ZERO_ADDRESS, "0x4D1A2e2bB4F88F0250f26Ffff098B0b30B26BF38"),
    ("0xdeadbeef00000000000000000000000000000000", "0xB928f69Bb1D91Cd65274e3c79d8986362984fDA3"),
])
def test_create2_address_eip1014_examples(deployer, expected):
    assert create2_address(deployer, ZERO_SALT, keccak(b"\x00")) == expected


def test_last_byte_matches_uses_mask():
    # 0x15 = 0b00010101
    assert last_byte_matches("0x" + "00" * 19 + "15", "0x" + "00" * 19 + "ff")
    assert last_byte_matches("0x" + "00" * 19 + "ea", "0x" + "00" * 19 + "00")
    assert not last_byte_matches("0x" + "00" * 19 + "01", "0x" + "00" * 19 + "00")


def test_find_salt_returns_first_match():
    deployer = "0xdeadbeef00000000000000000000000000000000"
    reference = "0x" + "00" * 19 + "15"

    salt, address = find_salt(deployer, "0x00", lambda candidate: last_byte_matches(candidate, reference))

    assert len(salt) == 32
    assert address == create2_address(deployer, salt, keccak(b"\x00"))
    assert last_byte_matches(address, reference)
    for earlier in range(int.from_bytes(salt, "big")):
        candidate = create2_address(deployer, earlier.to_bytes(32, "big"), keccak(b"\x00"))
        assert not last_byte_matches(candidate, reference)


def test_find_salt_counter_starts_at_zero():
    salt, address = find_salt(ZERO_ADDRESS, b"\x00", lambda candidate: True)

    assert salt == b"\x00" * 32
    assert address == "0x4D1A2e2bB4F88F0250f26Ffff098B0b30B26BF38"


def test_find_salt_exhausted():
    with pytest.raises(SaltNotFoundError):
        find_salt(ZERO_ADDRESS, b"\x00", lambda candidate: False, max_iterations=10)
