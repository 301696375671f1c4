"""
CREATE2 address prediction and salt grinding
"""

import logging
from typing import Callable, Tuple, Union

from eth_utils import keccak, to_bytes, to_checksum_address

logger = logging.getLogger(__name__)

LAST_BYTE_MASK = 0x15
DEFAULT_MAX_ITERATIONS = 1_000_000


class SaltNotFoundError(Exception):
    """No salt within the iteration budget satisfies the predicate"""


def _as_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return to_bytes(hexstr=value)


def create2_address(deployer: Union[str, bytes], salt: Union[str, bytes], init_code_hash: Union[str, bytes]) -> str:
    """keccak256(0xff ++ deployer ++ salt ++ keccak256(init_code))[12:]"""
    data = b"\xff" + _as_bytes(deployer) + _as_bytes(salt) + _as_bytes(init_code_hash)
    return to_checksum_address(keccak(data)[12:])


def last_byte_matches(candidate: str, reference: str, mask: int = LAST_BYTE_MASK) -> bool:
    """Compare the masked last byte of two addresses"""
    return (int(candidate[-2:], 16) & mask) == (int(reference[-2:], 16) & mask)


def find_salt(
    deployer: str,
    init_code: Union[str, bytes],
    predicate: Callable[[str], bool],
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> Tuple[bytes, str]:
    """
    Grind 32-byte counter salts until the predicted address satisfies ``predicate``

    Returns:
        (salt, checksummed address)
    """
    init_code_hash = keccak(_as_bytes(init_code))
    deployer_bytes = _as_bytes(deployer)

    for i in range(max_iterations):
        salt = i.to_bytes(32, "big")
        address = create2_address(deployer_bytes, salt, init_code_hash)

        if predicate(address):
            logger.info(f"✅ Found salt {i} -> {address}")
            return salt, address

        if i % 50000 == 0 and i > 0:
            logger.info(f"   Searching... {i}")

    raise SaltNotFoundError(f"No matching address in {max_iterations} salts")
