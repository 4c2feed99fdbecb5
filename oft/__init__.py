from oft.constants import OFTConstants
from oft.oft import OFTBridge
from oft.options import OptionsBuilder, decode_options, parse_option_group
from oft.types import (AdapterToken, MessagingFee, NativeOFTToken, SendParam, SendRequest, SendResult,
                       TokenResolution)
