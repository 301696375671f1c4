"""
Block header reconstruction

Rebuilds the exact RLP encoding of a block header from the fields returned by
``eth_getBlockByNumber``. RPC clients do not report which fork extensions a
header carries, so every inclusion pattern of the optional trailing fields is
tried until the keccak of the encoding equals the block hash.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple

import ethereum_rlp as eth_rlp
from eth_utils import is_0x_prefixed, is_hex, keccak, remove_0x_prefix

logger = logging.getLogger(__name__)

HASH_SIZE = 32
BLOOM_SIZE = 256
NONCE_SIZE = 8

EMPTY_OMMERS_HASH = "0x1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347"
# Coinbase reported for Optimism blocks when the client omits it
OPTIMISM_FEE_VAULT = "0x4200000000000000000000000000000000000011"
ZERO_HASH = "0x" + "00" * HASH_SIZE
ZERO_NONCE = "0x" + "00" * NONCE_SIZE

_EMPTY_LITERALS = ("", "0x", "0x0", "0x00")


class MalformedHeaderError(ValueError):
    """A header field violates its fixed format"""


class HeaderNotFoundError(Exception):
    """No inclusion pattern of the optional fields reproduces the target hash"""

    def __init__(self, attempts: int, target_hash: bytes = b""):
        self.attempts = attempts
        self.target_hash = target_hash
        super().__init__(
            f"No header encoding matches 0x{target_hash.hex()} after {attempts} candidates"
        )


@dataclass(frozen=True)
class HeaderField:
    """Header field descriptor"""
    name: str
    kind: str = "bytes"  # hash, address, bloom, int, bytes, nonce
    width: Optional[int] = None


@dataclass
class HeaderMatch:
    """Encoding whose keccak equals the target hash"""
    encoding: bytes
    included: Tuple[str, ...]
    mask: int
    attempts: int

    @property
    def block_hash(self) -> bytes:
        return keccak(self.encoding)


MANDATORY_FIELDS: Tuple[HeaderField, ...] = (
    HeaderField("parentHash", "hash", HASH_SIZE),
    HeaderField("sha3Uncles", "hash", HASH_SIZE),
    HeaderField("miner", "address", 20),
    HeaderField("stateRoot", "hash", HASH_SIZE),
    HeaderField("transactionsRoot", "hash", HASH_SIZE),
    HeaderField("receiptsRoot", "hash", HASH_SIZE),
    HeaderField("logsBloom", "bloom", BLOOM_SIZE),
    HeaderField("difficulty", "int"),
    HeaderField("number", "int"),
    HeaderField("gasLimit", "int"),
    HeaderField("gasUsed", "int"),
    HeaderField("timestamp", "int"),
    HeaderField("extraData", "bytes"),
    HeaderField("mixHash", "hash", HASH_SIZE),
    HeaderField("nonce", "nonce", NONCE_SIZE),
)

# Fork extensions in the order the protocol appends them
OPTIONAL_FIELDS: Tuple[HeaderField, ...] = (
    HeaderField("baseFeePerGas", "int"),                    # London
    HeaderField("withdrawalsRoot", "hash", HASH_SIZE),      # Shanghai
    HeaderField("blobGasUsed", "int"),                      # Cancun
    HeaderField("excessBlobGas", "int"),                    # Cancun
    HeaderField("parentBeaconBlockRoot", "hash", HASH_SIZE),  # Cancun
    HeaderField("requestsHash", "hash", HASH_SIZE),         # Prague
)

_OPTIONAL_INDEX = {field.name: index for index, field in enumerate(OPTIONAL_FIELDS)}


def _hex_to_bytes(value: str) -> bytes:
    digits = remove_0x_prefix(value)
    if len(digits) % 2:
        digits = "0" + digits
    return bytes.fromhex(digits)


def to_field_bytes(value: Any) -> bytes:
    """
    Convert a header value to its canonical minimal byte string

    Integers are big-endian without leading zero bytes (zero is empty),
    hex literals are decoded, any other text is UTF-8 encoded.
    """
    if value is None:
        raise MalformedHeaderError("Undefined value passed to to_field_bytes")

    if isinstance(value, int):
        if value < 0:
            raise MalformedHeaderError("Negative values not supported")
        if value == 0:
            return b""
        return value.to_bytes((value.bit_length() + 7) // 8, "big")

    if isinstance(value, (bytes, bytearray)):
        return bytes(value)

    if isinstance(value, str):
        if value in _EMPTY_LITERALS:
            return b""
        if is_0x_prefixed(value) and is_hex(value):
            return _hex_to_bytes(value)
        return value.encode("utf-8")

    raise MalformedHeaderError(f"Unsupported header value type: {type(value).__name__}")


def to_nonce_bytes(value: Any, width: int = NONCE_SIZE) -> bytes:
    """Left-pad or truncate a nonce to its fixed width"""
    if value is None:
        return b"\x00" * width

    raw = to_field_bytes(value)
    if len(raw) < width:
        return raw.rjust(width, b"\x00")
    return raw[:width]


def encode_field(field: HeaderField, value: Any) -> bytes:
    """Normalize a single value according to its descriptor"""
    if field.kind == "nonce":
        return to_nonce_bytes(value, field.width or NONCE_SIZE)

    if field.kind == "bloom":
        if isinstance(value, str):
            value = "".join(value.split())
        raw = to_field_bytes(value)
        if len(raw) != BLOOM_SIZE:
            raise MalformedHeaderError(
                f"Invalid {field.name} length: {len(raw)}, expected {BLOOM_SIZE}"
            )
        return raw

    return to_field_bytes(value)


def encode_header(fields: Sequence[bytes]) -> bytes:
    """RLP-encode an ordered list of header fields"""
    return bytes(eth_rlp.encode(list(fields)))


def candidate_masks(optional_names: Sequence[str]) -> Iterator[int]:
    """
    Yield inclusion masks, most likely first

    Bit ``i`` selects ``optional_names[i]``. The base-fee-only pattern and the
    all-fields pattern go first, the rest follow in increasing order.
    """
    total = 1 << len(optional_names)

    priority: List[int] = []
    if "baseFeePerGas" in optional_names:
        priority.append(1 << list(optional_names).index("baseFeePerGas"))
    if total > 1:
        priority.append(total - 1)

    seen = set()
    for mask in priority + list(range(total)):
        if mask in seen:
            continue
        seen.add(mask)
        yield mask


def reconstruct(
    target_hash: Any,
    mandatory: Sequence[Any],
    optional: Sequence[Tuple[str, Any]],
) -> HeaderMatch:
    """
    Find the header encoding that hashes to ``target_hash``

    Args:
        target_hash: 32-byte block hash (bytes or hex string)
        mandatory: values for MANDATORY_FIELDS, in order
        optional: (name, value) pairs; a None value marks the field absent

    Returns:
        HeaderMatch for the first matching candidate

    Raises:
        MalformedHeaderError: a field is malformed (checked before hashing)
        HeaderNotFoundError: all 2^k candidates were tried without a match
    """
    target = to_field_bytes(target_hash)
    if len(target) != HASH_SIZE:
        raise MalformedHeaderError(f"Target hash must be {HASH_SIZE} bytes, got {len(target)}")

    if len(mandatory) != len(MANDATORY_FIELDS):
        raise MalformedHeaderError(
            f"Expected {len(MANDATORY_FIELDS)} mandatory fields, got {len(mandatory)}"
        )

    base_fields = [encode_field(field, value) for field, value in zip(MANDATORY_FIELDS, mandatory)]

    available: List[Tuple[str, bytes]] = []
    for name, value in sorted(optional, key=lambda item: _OPTIONAL_INDEX.get(item[0], -1)):
        if name not in _OPTIONAL_INDEX:
            raise MalformedHeaderError(f"Unknown optional header field: {name}")
        if value is None:
            continue
        available.append((name, encode_field(OPTIONAL_FIELDS[_OPTIONAL_INDEX[name]], value)))

    names = [name for name, _ in available]
    logger.info(
        f"🔍 Testing up to {1 << len(names)} combinations with {len(names)} optional fields"
        + (f" ({', '.join(names)})" if names else "")
    )

    attempts = 0
    for mask in candidate_masks(names):
        attempts += 1
        header_list = list(base_fields)
        included = []

        for i, (name, raw) in enumerate(available):
            if mask & (1 << i):
                header_list.append(raw)
                included.append(name)

        encoding = encode_header(header_list)
        logger.debug(f"   mask {mask}: {', '.join(included) or 'none'}")

        if keccak(encoding) == target:
            logger.info(
                f"✅ Found matching combination (mask {mask}, attempt {attempts}): "
                f"{', '.join(included) or 'no optional fields'}"
            )
            return HeaderMatch(
                encoding=encoding,
                included=tuple(included),
                mask=mask,
                attempts=attempts,
            )

    logger.warning(f"❌ No matching combination found after {attempts} candidates")
    raise HeaderNotFoundError(attempts, target)


def fields_from_block(block: Mapping[str, Any]) -> Tuple[List[Any], List[Tuple[str, Any]]]:
    """Split an RPC block into mandatory values and optional (name, value) pairs"""

    def value_or(key: str, default: Any) -> Any:
        value = block.get(key)
        return default if value is None else value

    mandatory = [
        block.get("parentHash"),
        value_or("sha3Uncles", EMPTY_OMMERS_HASH),
        block.get("miner") or block.get("coinbase") or OPTIMISM_FEE_VAULT,
        block.get("stateRoot"),
        block.get("transactionsRoot"),
        block.get("receiptsRoot"),
        block.get("logsBloom"),
        value_or("difficulty", 0),
        block.get("number"),
        block.get("gasLimit"),
        block.get("gasUsed"),
        block.get("timestamp"),
        value_or("extraData", "0x"),
        value_or("mixHash", ZERO_HASH),
        value_or("nonce", ZERO_NONCE),
    ]
    optional = [(field.name, block.get(field.name)) for field in OPTIONAL_FIELDS]
    return mandatory, optional


def reconstruct_from_block(block: Mapping[str, Any]) -> HeaderMatch:
    """Reconstruct the RLP header of a block fetched over RPC"""
    if block.get("hash") is None:
        raise MalformedHeaderError("Block has no hash (pending block?)")

    mandatory, optional = fields_from_block(block)
    for field, value in zip(MANDATORY_FIELDS, mandatory):
        logger.debug(f"   {field.name}: {value!r}")
    for name, value in optional:
        logger.debug(f"   {name}: {f'present ({value!r})' if value is not None else 'absent'}")

    return reconstruct(block["hash"], mandatory, optional)
