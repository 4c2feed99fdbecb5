import logging

from hexbytes import HexBytes

from base.errors import (InsufficientBalance, InvalidRequest, SendTransactionFailed, TransactionFailed,
                         TransactionNotFound)
from logic.state import SendStep, State
from network import TransactionStatus
from oft import AdapterToken, OFTConstants, OptionsBuilder, SendParam, SendRequest
from utility import AddressHelper, format_amount, parse_amount

logger = logging.getLogger(__name__)


def build_options(request: SendRequest) -> OptionsBuilder:
    return OptionsBuilder.from_option_lists(request.lz_receive_options, request.lz_compose_options,
                                            request.native_drop_options)


def _is_valid_eid(eid) -> bool:
    return isinstance(eid, int) and not isinstance(eid, bool) and 0 < eid <= OFTConstants.MAX_UINT32


# State for checking the request before any network call
class ValidateRequestState(State):
    step = SendStep.VALIDATE

    def handle(self, flow) -> None:
        request = flow.request

        if not request.src_eid or not request.dst_eid or not request.amount or not request.to:
            raise InvalidRequest("Missing required fields: src_eid, dst_eid, amount, to")

        if not _is_valid_eid(request.src_eid) or not _is_valid_eid(request.dst_eid):
            raise InvalidRequest(f"Invalid endpoint ids: {request.src_eid} -> {request.dst_eid}")

        if not AddressHelper.is_valid_address(request.to):
            raise InvalidRequest(f"Invalid recipient address: {request.to!r}")

        if request.oft_address and not AddressHelper.is_valid_address(request.oft_address):
            raise InvalidRequest(f"Invalid OFT contract address: {request.oft_address!r}")

        if request.compose_msg:
            try:
                HexBytes(request.compose_msg)
            except ValueError as ex:
                raise InvalidRequest(f"Compose message must be hex encoded: {request.compose_msg!r}") from ex

        # Surfaces malformed executor options before anything is sent
        build_options(request)

        logger.info(f"From: chain {request.src_eid}. To: chain {request.dst_eid}. "
                    f"Amount: {request.amount}. Recipient: {request.to}")
        flow.set_state(ResolveBridgeState())


# State for finding the OFT contract on the source chain
class ResolveBridgeState(State):
    step = SendStep.RESOLVE_BRIDGE

    def handle(self, flow) -> None:
        request = flow.request

        flow.network = flow.registry.get_network(request.src_eid)
        bridge_address = flow.registry.resolve_bridge_address(request.src_eid, request.token_symbol,
                                                              request.oft_address)
        flow.bridge = flow.bridge_factory(flow.network, bridge_address)

        logger.info(f"{flow.network.name}. OFT contract: {flow.bridge.address}")
        flow.set_state(ResolveTokenState())


# State for probing the OFT contract for an underlying token
class ResolveTokenState(State):
    step = SendStep.RESOLVE_TOKEN

    def handle(self, flow) -> None:
        flow.token = flow.bridge.resolve_token()

        if isinstance(flow.token, AdapterToken):
            logger.info(f"OFT adapter detected. Underlying token: {flow.token.underlying_token}")
        else:
            logger.info("Native OFT detected")

        flow.set_state(ResolveDecimalsState())


# State for reading token decimals and converting the amounts
class ResolveDecimalsState(State):
    step = SendStep.RESOLVE_DECIMALS

    def handle(self, flow) -> None:
        request = flow.request

        flow.decimals = flow.balance_reader.get_decimals(request.src_eid, flow.token.token_address)
        flow.amount = parse_amount(request.amount, flow.decimals)
        flow.min_amount = parse_amount(request.min_amount, flow.decimals) if request.min_amount else flow.amount

        if flow.amount == 0:
            raise InvalidRequest("Amount must be greater than zero")
        if flow.min_amount > flow.amount:
            raise InvalidRequest(f"Minimum amount {request.min_amount} is greater than amount {request.amount}")

        logger.info(f"Token decimals: {flow.decimals}. Amount in units: {flow.amount}")
        flow.set_state(ApproveTokenState())


# State for approving the token to the OFT adapter when it's needed
class ApproveTokenState(State):
    step = SendStep.APPROVE

    def handle(self, flow) -> None:
        if not flow.bridge.is_approval_required():
            logger.info("No approval required")
            flow.set_state(BuildOptionsState())
            return

        sender = flow.account.address
        allowance = flow.balance_reader.get_allowance(sender, flow.bridge.address, flow.request.src_eid,
                                                      token_address=flow.token.token_address)
        logger.info(f"Current allowance: {allowance}. Required amount: {flow.amount}")

        if allowance >= flow.amount:
            logger.info("Sufficient allowance already exists")
            flow.set_state(BuildOptionsState())
            return

        tx_hash = flow.network.approve_token_usage(flow.account.key, flow.token.token_address,
                                                   flow.bridge.address, OFTConstants.MAX_UINT256)
        flow.approval_tx_hash = HexBytes(tx_hash).to_0x_hex()

        result = flow.network.wait_for_transaction(tx_hash, flow.confirmation_timeout, flow.poll_interval,
                                                   flow.cancel_event)
        if not flow.network.check_tx_result(result, "Approve"):
            if result == TransactionStatus.NOT_FOUND:
                raise TransactionNotFound(f"Approval {flow.approval_tx_hash} was not mined in time")
            raise TransactionFailed(f"Approval {flow.approval_tx_hash} failed")

        flow.set_state(BuildOptionsState())


# State for assembling the send parameters
class BuildOptionsState(State):
    step = SendStep.BUILD_OPTIONS

    def handle(self, flow) -> None:
        request = flow.request
        extra_options = build_options(request).to_bytes()

        flow.send_param = SendParam(
            dst_eid=request.dst_eid,
            to=AddressHelper.address_to_bytes32(request.to),
            amount_ld=flow.amount,
            min_amount_ld=flow.min_amount,
            extra_options=extra_options,
            compose_msg=bytes(HexBytes(request.compose_msg)) if request.compose_msg else b"",
        )

        logger.info(f"Extra options: {HexBytes(extra_options).to_0x_hex()}")
        flow.set_state(QuoteFeeState())


# State for quoting the LayerZero messaging fee
class QuoteFeeState(State):
    step = SendStep.QUOTE

    def handle(self, flow) -> None:
        flow.fee = flow.bridge.quote_send(flow.send_param)

        logger.info(f"Native fee: {format_amount(flow.fee.native_fee, OFTConstants.NATIVE_DECIMALS)} "
                    f"{flow.network.native_token}. LZ token fee: {flow.fee.lz_token_fee}")
        flow.set_state(CheckBalanceState())


# State for checking that the send can't revert because of balances
class CheckBalanceState(State):
    step = SendStep.CHECK_BALANCE

    def is_native_wrapped(self, flow) -> bool:
        wrapped_native = flow.network.get_wrapped_native_address()
        return wrapped_native is not None and wrapped_native.lower() == flow.token.token_address.lower()

    def handle(self, flow) -> None:
        request = flow.request
        sender = flow.account.address

        required_native = flow.fee.native_fee
        if self.is_native_wrapped(flow):
            required_native += flow.amount

        native_balance = flow.balance_reader.get_native_balance(sender, request.src_eid)
        if native_balance < required_native:
            raise InsufficientBalance(
                f"Insufficient {flow.network.native_token} balance. "
                f"Required: {format_amount(required_native, OFTConstants.NATIVE_DECIMALS)}, "
                f"available: {format_amount(native_balance, OFTConstants.NATIVE_DECIMALS)}")

        token_balance = flow.balance_reader.get_token_balance(sender, request.src_eid,
                                                              token_address=flow.token.token_address)
        if token_balance < flow.amount:
            raise InsufficientBalance(
                f"Insufficient token balance. Required: {format_amount(flow.amount, flow.decimals)}, "
                f"available: {format_amount(token_balance, flow.decimals)}")

        flow.set_state(SubmitSendState())


# State for submitting the send transaction
class SubmitSendState(State):
    step = SendStep.SUBMIT

    def handle(self, flow) -> None:
        tx_hash = flow.bridge.send(flow.account, flow.send_param, flow.fee)
        flow.tx_hash = HexBytes(tx_hash).to_0x_hex()

        logger.info(f"Transaction submitted: {flow.tx_hash}")
        flow.set_state(ConfirmSendState())


# State for waiting for the source chain transaction to be mined
class ConfirmSendState(State):
    step = SendStep.CONFIRM

    def handle(self, flow) -> None:
        result = flow.network.wait_for_transaction(HexBytes(flow.tx_hash), flow.confirmation_timeout,
                                                   flow.poll_interval, flow.cancel_event)

        if not flow.network.check_tx_result(result, "OFT send"):
            if result == TransactionStatus.NOT_FOUND:
                raise TransactionNotFound(f"Transaction {flow.tx_hash} was not mined in time")
            raise SendTransactionFailed(f"Transaction {flow.tx_hash} reverted")

        flow.finish_successfully()
