from utility.address import AddressHelper
from utility.amount import parse_amount, format_amount
from utility.wallet import WalletHelper
