from eth_utils import is_address, is_checksum_address, to_checksum_address
from hexbytes import HexBytes

from base.errors import InvalidRequest

ZERO_BYTES32 = b"\x00" * 32


class AddressHelper:

    @staticmethod
    def is_valid_address(address) -> bool:
        """ Method that checks that the value is a 20-byte hex address. All lower or all upper case hex is
        accepted as is, mixed case must be a valid EIP-55 checksum """

        if not isinstance(address, str) or not address.startswith("0x"):
            return False
        if not is_address(address):
            return False

        body = address[2:]
        if body == body.lower() or body == body.upper():
            return True

        return is_checksum_address(address)

    @staticmethod
    def to_checksum(address: str) -> str:
        if not AddressHelper.is_valid_address(address):
            raise InvalidRequest(f"Invalid address: {address!r}")

        return to_checksum_address(address)

    @staticmethod
    def address_to_bytes32(address: str) -> bytes:
        """ Method that left pads a 20-byte address with zeros to the 32-byte word used on the wire """

        checksum_address = AddressHelper.to_checksum(address)

        return HexBytes(checksum_address).rjust(32, b"\x00")

    @staticmethod
    def bytes32_to_address(value) -> str:
        """ Method that takes the low 20 bytes of a 32-byte word and returns them as a checksum address """

        word = bytes(HexBytes(value))
        if len(word) != 32:
            raise InvalidRequest(f"Expected 32 bytes, got {len(word)}")

        return to_checksum_address(word[12:])
