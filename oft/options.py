"""LayerZero v2 executor options (options type 3).

Layout of the encoded blob::

    uint16 type (= 3)
    repeated:
        uint8  worker id (1 = executor)
        uint16 size (len(params) + 1)
        uint8  option type
        bytes  params

Params are tightly packed big-endian values:

    lzReceive   (1): uint128 gas [, uint128 value]      value omitted when zero
    nativeDrop  (2): uint128 amount, bytes32 receiver
    lzCompose   (3): uint16 index, uint128 gas [, uint128 value]
"""
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple, Union

from eth_abi.packed import encode_packed
from hexbytes import HexBytes

from base.errors import InvalidNativeDropArgument, InvalidRequest
from oft.constants import OFTConstants
from utility import AddressHelper

logger = logging.getLogger(__name__)

OPTIONS_TYPE_3 = 3


class WorkerId(IntEnum):
    EXECUTOR = 1


class ExecutorOptionType(IntEnum):
    LZ_RECEIVE = 1
    NATIVE_DROP = 2
    LZ_COMPOSE = 3


def _check_uint(value: int, max_value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequest(f"{name} must be an integer, got {value!r}")
    if value < 0 or value > max_value:
        raise InvalidRequest(f"{name} is out of range: {value}")

    return value


@dataclass(frozen=True)
class LzReceiveOption:
    gas: int
    value: int = 0

    option_type = ExecutorOptionType.LZ_RECEIVE

    def encode(self) -> bytes:
        if self.value == 0:
            return encode_packed(['uint128'], [self.gas])
        return encode_packed(['uint128', 'uint128'], [self.gas, self.value])


@dataclass(frozen=True)
class NativeDropOption:
    amount: int
    receiver: str

    option_type = ExecutorOptionType.NATIVE_DROP

    def encode(self) -> bytes:
        return encode_packed(['uint128', 'bytes32'], [self.amount, AddressHelper.address_to_bytes32(self.receiver)])


@dataclass(frozen=True)
class LzComposeOption:
    index: int
    gas: int
    value: int = 0

    option_type = ExecutorOptionType.LZ_COMPOSE

    def encode(self) -> bytes:
        if self.value == 0:
            return encode_packed(['uint16', 'uint128'], [self.index, self.gas])
        return encode_packed(['uint16', 'uint128', 'uint128'], [self.index, self.gas, self.value])


ExecutorOption = Union[LzReceiveOption, NativeDropOption, LzComposeOption]


class OptionsBuilder:
    """ Accumulates executor options in call order and serializes them to the type 3 blob

    When no lzReceive option is added, a default one is emitted first. Pass default_lz_receive_gas=None
    to disable it
    """

    def __init__(self, default_lz_receive_gas: Optional[int] = OFTConstants.DEFAULT_LZ_RECEIVE_GAS,
                 default_lz_receive_value: int = OFTConstants.DEFAULT_LZ_RECEIVE_VALUE) -> None:
        self._options: List[ExecutorOption] = []
        self._default_lz_receive: Optional[LzReceiveOption] = None

        if default_lz_receive_gas is not None:
            self._default_lz_receive = LzReceiveOption(
                _check_uint(default_lz_receive_gas, OFTConstants.MAX_UINT128, "Default lzReceive gas"),
                _check_uint(default_lz_receive_value, OFTConstants.MAX_UINT128, "Default lzReceive value"))

    @classmethod
    def from_option_lists(cls, lz_receive_options: Sequence[Tuple[int, int]] = (),
                          lz_compose_options: Sequence[Tuple[int, int, int]] = (),
                          native_drop_options: Sequence[Tuple[str, str]] = ()) -> 'OptionsBuilder':
        builder = cls()

        for gas, value in lz_receive_options:
            builder.add_lz_receive_option(gas, value)
        for index, gas, value in lz_compose_options:
            builder.add_lz_compose_option(index, gas, value)
        for amount, receiver in native_drop_options:
            builder.add_native_drop_option(amount, receiver)

        return builder

    def add_lz_receive_option(self, gas: int, value: int = 0) -> 'OptionsBuilder':
        option = LzReceiveOption(_check_uint(gas, OFTConstants.MAX_UINT128, "lzReceive gas"),
                                 _check_uint(value, OFTConstants.MAX_UINT128, "lzReceive value"))
        self._options.append(option)
        logger.debug(f"Added lzReceive option: {gas} gas, {value} value")

        return self

    def add_lz_compose_option(self, index: int, gas: int, value: int = 0) -> 'OptionsBuilder':
        _check_uint(index, OFTConstants.MAX_UINT16, "lzCompose index")
        if any(isinstance(o, LzComposeOption) and o.index == index for o in self._options):
            raise InvalidRequest(f"lzCompose option with index {index} is already added")

        option = LzComposeOption(index, _check_uint(gas, OFTConstants.MAX_UINT128, "lzCompose gas"),
                                 _check_uint(value, OFTConstants.MAX_UINT128, "lzCompose value"))
        self._options.append(option)
        logger.debug(f"Added lzCompose option: index {index}, {gas} gas, {value} value")

        return self

    def add_native_drop_option(self, amount: str, receiver: str) -> 'OptionsBuilder':
        amount = amount.strip() if isinstance(amount, str) else ""
        receiver = receiver.strip() if isinstance(receiver, str) else ""

        if not amount or not receiver:
            raise InvalidNativeDropArgument("Both amount and recipient must be provided for a native drop")
        if not amount.isdigit():
            raise InvalidNativeDropArgument(f"Native drop amount must be a non-negative integer in wei: {amount!r}")
        if int(amount) > OFTConstants.MAX_UINT128:
            raise InvalidNativeDropArgument(f"Native drop amount is too large: {amount}")
        if not AddressHelper.is_valid_address(receiver):
            raise InvalidNativeDropArgument(f"Invalid native drop recipient: {receiver!r}")

        self._options.append(NativeDropOption(int(amount), AddressHelper.to_checksum(receiver)))
        logger.debug(f"Added native drop option: {amount} wei to {receiver}")

        return self

    @property
    def options(self) -> List[ExecutorOption]:
        """ Options in wire order, including the default lzReceive option when it applies """

        has_lz_receive = any(isinstance(o, LzReceiveOption) for o in self._options)
        if has_lz_receive or self._default_lz_receive is None:
            return list(self._options)

        return [self._default_lz_receive] + self._options

    def to_bytes(self) -> bytes:
        encoded = encode_packed(['uint16'], [OPTIONS_TYPE_3])

        for option in self.options:
            params = option.encode()
            encoded += encode_packed(['uint8', 'uint16', 'uint8'],
                                     [int(WorkerId.EXECUTOR), len(params) + 1, int(option.option_type)])
            encoded += params

        return encoded

    def to_hex(self) -> str:
        return HexBytes(self.to_bytes()).to_0x_hex()


def _decode_option(option_type: int, params: bytes) -> ExecutorOption:
    if option_type == ExecutorOptionType.LZ_RECEIVE and len(params) in (16, 32):
        value = int.from_bytes(params[16:32], "big") if len(params) == 32 else 0
        return LzReceiveOption(int.from_bytes(params[:16], "big"), value)

    if option_type == ExecutorOptionType.NATIVE_DROP and len(params) == 48:
        return NativeDropOption(int.from_bytes(params[:16], "big"),
                                AddressHelper.bytes32_to_address(params[16:48]))

    if option_type == ExecutorOptionType.LZ_COMPOSE and len(params) in (18, 34):
        value = int.from_bytes(params[18:34], "big") if len(params) == 34 else 0
        return LzComposeOption(int.from_bytes(params[:2], "big"), int.from_bytes(params[2:18], "big"), value)

    raise InvalidRequest(f"Unsupported executor option type {option_type} with {len(params)} bytes of params")


def decode_options(options: Union[str, bytes]) -> List[ExecutorOption]:
    """ Parse a type 3 options blob back into executor options """

    data = bytes(HexBytes(options))
    if len(data) < 2 or int.from_bytes(data[:2], "big") != OPTIONS_TYPE_3:
        raise InvalidRequest("Options must start with the type 3 header")

    result = []
    cursor = 2

    while cursor < len(data):
        if cursor + 4 > len(data):
            raise InvalidRequest(f"Truncated option header at byte {cursor}")

        worker_id = data[cursor]
        size = int.from_bytes(data[cursor + 1:cursor + 3], "big")
        option_type = data[cursor + 3]
        end = cursor + 3 + size

        if worker_id != WorkerId.EXECUTOR:
            raise InvalidRequest(f"Only executor options are supported, got worker {worker_id}")
        if size == 0 or end > len(data):
            raise InvalidRequest(f"Truncated option at byte {cursor}")

        result.append(_decode_option(option_type, data[cursor + 4:end]))
        cursor = end

    return result


def parse_option_group(value: str, size: int, name: str) -> Tuple[str, ...]:
    """ Split a comma separated option group (e.g. "200000,0") into exactly size parts """

    parts = tuple(part.strip() for part in value.split(","))
    if len(parts) != size or not all(parts):
        raise InvalidRequest(f"Invalid {name} option {value!r}: expected {size} comma separated values")

    return parts
