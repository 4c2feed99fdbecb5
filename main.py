import argparse
import logging
import sys
from typing import Any, List, Tuple

from base.errors import BaseError, InsufficientBalance, InvalidRequest
from config import (ConfigurationHelper, DEFAULT_PRIVATE_KEYS_FILE_PATH, LOG_DIRECTORY, PAYMENT_LINKS_FILE_PATH,
                    PRIVATE_KEY, PaymentRoute, create_default_registry)
from logger import setup_file_logger, setup_logger
from logic import SendFlow
from network import BalanceReader, DEFAULT_TOKEN_SYMBOL
from oft import OFTBridge, OFTConstants, SendRequest, SendResult, parse_option_group
from paylink import JsonPaymentLinkStore, PaymentLink, PaymentService
from utility import AddressHelper, WalletHelper, format_amount, parse_amount
from utility.address import ZERO_BYTES32

logger = logging.getLogger(__name__)


def _to_int(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError as ex:
        raise InvalidRequest(f"{name} must be an integer, got {value!r}") from ex


def parse_lz_receive_options(values: List[str]) -> List[Tuple[int, int]]:
    result = []
    for value in values or []:
        gas, native_value = parse_option_group(value, 2, "lzReceive")
        result.append((_to_int(gas, "lzReceive gas"), _to_int(native_value, "lzReceive value")))
    return result


def parse_lz_compose_options(values: List[str]) -> List[Tuple[int, int, int]]:
    result = []
    for value in values or []:
        index, gas, native_value = parse_option_group(value, 3, "lzCompose")
        result.append((_to_int(index, "lzCompose index"), _to_int(gas, "lzCompose gas"),
                       _to_int(native_value, "lzCompose value")))
    return result


def parse_native_drop_options(values: List[str]) -> List[Tuple[str, str]]:
    result = []
    for value in values or []:
        amount, recipient = parse_option_group(value, 2, "native drop")
        result.append((amount, recipient))
    return result


class PayMeeBridger:

    def __init__(self) -> None:
        setup_logger()
        self.wh = WalletHelper()
        self.registry = create_default_registry()

    def main(self) -> None:
        parser = argparse.ArgumentParser(description="paymee-bridger CLI")
        subparsers = parser.add_subparsers(title="subcommands", dest="subcommand")

        self._create_send_parser(subparsers)
        self._create_balance_parser(subparsers)
        self._create_peers_parser(subparsers)
        self._create_wrap_parser(subparsers)
        self._create_link_parser(subparsers)

        args = parser.parse_args()
        if not hasattr(args, "func"):
            parser.print_help()
            return

        try:
            ConfigurationHelper.check_configuration(self.registry)
            if args.log_file:
                setup_file_logger(LOG_DIRECTORY)
            args.func(args)
        except BaseError as ex:
            logger.error(f"{type(ex).__name__}: {ex}")
            sys.exit(1)

    def _report(self, result: SendResult) -> None:
        if result.success:
            logger.info(f"Transaction hash: {result.transaction_hash}")
            logger.info(f"LayerZero scan: {result.scan_link}")
            logger.info("Tokens will arrive on the destination chain shortly. Track them with the scan link")
            return

        logger.error(f"Transfer failed at {result.failed_step} step. {result.error_type}: {result.error_message}")
        if result.revert_data:
            logger.error(f"Revert data: {result.revert_data}")
        if result.transaction_hash:
            logger.error(f"Transaction hash: {result.transaction_hash}")
        sys.exit(1)

    def send(self, args: argparse.Namespace) -> None:
        account = self.wh.load_signer(PRIVATE_KEY, args.private_keys)
        logger.info(f"Using wallet: {account.address}")

        request = SendRequest(
            src_eid=args.src_eid,
            dst_eid=args.dst_eid,
            amount=args.amount,
            to=args.to,
            min_amount=args.min_amount,
            oft_address=args.oft_address,
            token_symbol=args.token,
            compose_msg=args.compose_msg,
            lz_receive_options=parse_lz_receive_options(args.lz_receive),
            lz_compose_options=parse_lz_compose_options(args.lz_compose),
            native_drop_options=parse_native_drop_options(args.native_drop),
        )

        flow = SendFlow(self.registry, account, request,
                        confirmation_timeout=ConfigurationHelper.get_confirmation_timeout())
        self._report(flow.run())

    def show_balance(self, args: argparse.Namespace) -> None:
        reader = BalanceReader(self.registry)
        network = self.registry.get_network(args.eid)
        binding = network.get_token_binding(args.token)
        decimals = reader.get_decimals(args.eid, binding.token_address)

        native_balance = reader.get_native_balance(args.address, args.eid)
        token_balance = reader.get_token_balance(args.address, args.eid, args.token)

        logger.info(f"{network.name}. {network.native_token} balance: "
                    f"{format_amount(native_balance, OFTConstants.NATIVE_DECIMALS)}")
        logger.info(f"{network.name}. {binding.symbol} balance: {format_amount(token_balance, decimals)}")

        if args.spender:
            allowance = reader.get_allowance(args.address, args.spender, args.eid, args.token)
            logger.info(f"{network.name}. {binding.symbol} allowance for {args.spender}: {allowance}")

    def check_peers(self, args: argparse.Namespace) -> None:
        network = self.registry.get_network(args.src_eid)
        bridge_address = self.registry.resolve_bridge_address(args.src_eid, args.token, args.oft_address)
        bridge = OFTBridge(network, bridge_address)

        logger.info(f"{network.name}. OFT contract: {bridge.address}")
        logger.info(f"Contract owner: {bridge.get_owner()}")

        peer = bridge.get_peer(args.dst_eid)
        if peer == ZERO_BYTES32:
            logger.info(f"No peer set for EID {args.dst_eid}")
            sys.exit(1)

        logger.info(f"Peer for EID {args.dst_eid}: {AddressHelper.bytes32_to_address(peer)}")

    def wrap(self, args: argparse.Namespace) -> None:
        account = self.wh.load_signer(PRIVATE_KEY, args.private_keys)
        network = self.registry.get_network(args.eid)

        amount = parse_amount(args.amount, OFTConstants.NATIVE_DECIMALS)
        if amount == 0:
            raise InvalidRequest("Amount to wrap must be greater than zero")

        balance = network.get_balance(account.address)
        if balance < amount:
            raise InsufficientBalance(f"Insufficient {network.native_token} balance to wrap. "
                                      f"Required: {format_amount(amount, OFTConstants.NATIVE_DECIMALS)}, "
                                      f"available: {format_amount(balance, OFTConstants.NATIVE_DECIMALS)}")

        logger.info(f"{network.name}. Wrapping {args.amount} {network.native_token}. Wallet: {account.address}")
        tx_hash = network.wrap_native_token(account.key, amount)

        result = network.wait_for_transaction(tx_hash, ConfigurationHelper.get_confirmation_timeout())
        if not network.check_tx_result(result, "Wrap"):
            logger.error(f"Transaction hash: {tx_hash.to_0x_hex()}")
            sys.exit(1)

        logger.info(f"Block explorer: {network.get_explorer_link(tx_hash.to_0x_hex())}")

    def create_link(self, args: argparse.Namespace) -> None:
        recipient = args.recipient
        if not recipient:
            recipient = self.wh.load_signer(PRIVATE_KEY, args.private_keys).address

        link = PaymentLink.create(args.amount, args.concept, args.client_name, recipient)
        JsonPaymentLinkStore(args.store).add(link)

        logger.info(f"Payment link created. Id: {link.id}. Recipient: {link.recipient_address}")

    def list_links(self, args: argparse.Namespace) -> None:
        for link in JsonPaymentLinkStore(args.store).list():
            logger.info(f"{link.id} | {link.status.value:<7} | {link.amount} | {link.client_name} | {link.concept}")

    def pay_link(self, args: argparse.Namespace) -> None:
        account = self.wh.load_signer(PRIVATE_KEY, args.private_keys)
        timeout = ConfigurationHelper.get_confirmation_timeout()

        def flow_factory(registry, signer, request):
            return SendFlow(registry, signer, request, confirmation_timeout=timeout)

        service = PaymentService(JsonPaymentLinkStore(args.store), self.registry, account, flow_factory)
        self._report(service.pay(args.link_id, args.src_eid, args.dst_eid, args.token))

    def _add_common_arguments(self, parser: Any) -> None:
        parser.add_argument("--keys", type=str, default=DEFAULT_PRIVATE_KEYS_FILE_PATH, dest="private_keys",
                            help="Path to the file containing the signing private key")
        parser.add_argument("--log-file", action="store_true", dest="log_file",
                            help="Also write logs to the logging directory")

    def _create_send_parser(self, subparsers: Any) -> None:
        send_parser = subparsers.add_parser("send", help="Send OFT tokens to another chain")

        send_parser.add_argument("src_eid", type=int, help="Source endpoint id (e.g. 40161)")
        send_parser.add_argument("dst_eid", type=int, help="Destination endpoint id (e.g. 40232)")
        send_parser.add_argument("amount", help="Amount in tokens (e.g. 0.01)")
        send_parser.add_argument("to", help="Recipient address on the destination chain")

        send_parser.add_argument("--oft", dest="oft_address", help="OFT contract address. Overrides the registry")
        send_parser.add_argument("--token", default=DEFAULT_TOKEN_SYMBOL, help="Token symbol from the registry")
        send_parser.add_argument("--min-amount", dest="min_amount", help="Minimum amount to receive")
        send_parser.add_argument("--compose-msg", dest="compose_msg", help="Hex encoded compose message")

        # Executor options
        send_parser.add_argument("--lz-receive", action="append", dest="lz_receive", metavar="GAS,VALUE",
                                 help="lzReceive option. Replaces the default of "
                                      f"{OFTConstants.DEFAULT_LZ_RECEIVE_GAS} gas")
        send_parser.add_argument("--lz-compose", action="append", dest="lz_compose", metavar="INDEX,GAS,VALUE",
                                 help="lzCompose option")
        send_parser.add_argument("--native-drop", action="append", dest="native_drop", metavar="AMOUNT,RECIPIENT",
                                 help="Native drop option. Amount in wei")

        self._add_common_arguments(send_parser)
        send_parser.set_defaults(func=self.send)

    def _create_balance_parser(self, subparsers: Any) -> None:
        balance_parser = subparsers.add_parser("balance", help="Show native and token balances")

        balance_parser.add_argument("address", help="Account address")
        balance_parser.add_argument("eid", type=int, help="Endpoint id of the chain")
        balance_parser.add_argument("--token", default=DEFAULT_TOKEN_SYMBOL, help="Token symbol from the registry")
        balance_parser.add_argument("--spender", help="Also show the allowance given to this address")

        self._add_common_arguments(balance_parser)
        balance_parser.set_defaults(func=self.show_balance)

    def _create_peers_parser(self, subparsers: Any) -> None:
        peers_parser = subparsers.add_parser("peers", help="Check the OFT peer configured for a destination")

        peers_parser.add_argument("src_eid", type=int, help="Endpoint id of the chain the OFT lives on")
        peers_parser.add_argument("dst_eid", type=int, help="Endpoint id of the peer chain")
        peers_parser.add_argument("--oft", dest="oft_address", help="OFT contract address. Overrides the registry")
        peers_parser.add_argument("--token", default=DEFAULT_TOKEN_SYMBOL, help="Token symbol from the registry")

        self._add_common_arguments(peers_parser)
        peers_parser.set_defaults(func=self.check_peers)

    def _create_wrap_parser(self, subparsers: Any) -> None:
        wrap_parser = subparsers.add_parser("wrap", help="Wrap native ETH into WETH before paying a link")

        wrap_parser.add_argument("amount", help="Amount of ETH to wrap (e.g. 0.1)")
        wrap_parser.add_argument("--eid", type=int, default=PaymentRoute.SRC_EID,
                                 help="Endpoint id of the chain to wrap on")

        self._add_common_arguments(wrap_parser)
        wrap_parser.set_defaults(func=self.wrap)

    def _create_link_parser(self, subparsers: Any) -> None:
        link_parser = subparsers.add_parser("link", help="Manage payment links")
        link_subparsers = link_parser.add_subparsers(title="link commands", dest="link_command")

        create_parser = link_subparsers.add_parser("create", help="Create a payment link")
        create_parser.add_argument("amount", help="Amount in ETH")
        create_parser.add_argument("concept", help="What the payment is for")
        create_parser.add_argument("client_name", help="Who pays")
        create_parser.add_argument("--recipient", help="Recipient address. Defaults to the signer address")
        create_parser.set_defaults(func=self.create_link)

        list_parser = link_subparsers.add_parser("list", help="List payment links")
        list_parser.set_defaults(func=self.list_links)

        pay_parser = link_subparsers.add_parser("pay", help="Pay a payment link")
        pay_parser.add_argument("link_id", help="Payment link id")
        pay_parser.add_argument("--src", type=int, default=PaymentRoute.SRC_EID, dest="src_eid",
                                help="Source endpoint id")
        pay_parser.add_argument("--dst", type=int, default=PaymentRoute.DST_EID, dest="dst_eid",
                                help="Destination endpoint id")
        pay_parser.add_argument("--token", default=PaymentRoute.TOKEN_SYMBOL, help="Token symbol from the registry")
        pay_parser.set_defaults(func=self.pay_link)

        for parser in (create_parser, list_parser, pay_parser):
            parser.add_argument("--store", default=PAYMENT_LINKS_FILE_PATH, help="Path to the payment links file")
            self._add_common_arguments(parser)


def main() -> None:
    app = PayMeeBridger()
    app.main()


if __name__ == "__main__":
    main()
