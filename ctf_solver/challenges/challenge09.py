"""
Challenge 9 - Private storage

``password`` is private but sits in storage slot 1, the mint counter in slot 2.
mintFlag expects the password with the byte selected by the counter cleared:

    mask = ~(0xFF << ((31 - count % 32) * 8))
"""

from typing import Union

from .base import BaseChallenge, ChallengeResult

PASSWORD_SLOT = 1
COUNT_SLOT = 2
WORD_MASK = (1 << 256) - 1


def password_mask(count: int) -> int:
    shift_bits = (31 - (count % 32)) * 8
    return ~(0xFF << shift_bits) & WORD_MASK


def masked_password(password: Union[int, bytes], count: int) -> bytes:
    """Apply the counter mask to a 32-byte password"""
    if isinstance(password, (bytes, bytearray)):
        password = int.from_bytes(password, "big")
    return (password & password_mask(count)).to_bytes(32, "big")


class StoragePasswordChallenge(BaseChallenge):
    """Read the private password from storage and submit it masked"""

    challenge_id = 9

    def get_name(self) -> str:
        return "Private Storage"

    def get_description(self) -> str:
        return "Read slots 1 and 2, mask one byte of the password and call mintFlag(bytes32)"

    async def execute(self) -> ChallengeResult:
        completed = await self.check_already_completed()
        if completed:
            return completed

        challenge_address = self.registry.address("Challenge9")

        self.logger.info("📖 Reading password from storage...")
        password = await self.client.get_storage_at(challenge_address, PASSWORD_SLOT)
        self.logger.info(f"🔒 Original password: 0x{password.hex()}")

        count_word = await self.client.get_storage_at(challenge_address, COUNT_SLOT)
        count = int.from_bytes(count_word, "big")
        self.logger.info(f"🔢 Current count: {count}")

        masked = masked_password(password, count)
        self.logger.info(f"🎭 Mask: 0x{password_mask(count):064x}")
        self.logger.info(f"🔑 Masked password: 0x{masked.hex()}")

        await self.transact("Challenge9", "mintFlag", [masked])

        # Another mint in between changes count and therefore the expected mask
        if not await self.has_minted():
            return self._create_result(
                False,
                {"count": count},
                error_message="Transaction succeeded but flag was not minted (count may have changed)",
            )

        return self._create_result(True, {"count": count, "password": "0x" + masked.hex()})
