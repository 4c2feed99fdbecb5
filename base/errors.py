from typing import Optional


class BaseError(Exception):
    pass


class NotSupported(BaseError):
    pass


class ConfigurationError(BaseError):
    pass


# -------- Request error --------

class InvalidRequest(BaseError):
    pass


class UnsupportedChain(BaseError):
    pass


class InvalidAmountFormat(BaseError):
    pass


class InvalidNativeDropArgument(BaseError):
    pass


class InsufficientBalance(BaseError):
    pass


class OperationCancelled(BaseError):
    pass


class PaymentLinkNotFound(BaseError):
    pass


class PaymentLinkStoreError(BaseError):
    pass


# -------- Blockchain error --------

class BlockchainError(BaseError):
    def __init__(self, message: str, data: Optional[str] = None) -> None:
        super().__init__(message)
        self.data = data


class RpcUnavailable(BlockchainError):
    pass


class ContractCallReverted(BlockchainError):
    pass


class QuoteFailed(BlockchainError):
    pass


class SendTransactionFailed(BlockchainError):
    pass


class TransactionNotFound(BlockchainError):
    pass


class TransactionFailed(BlockchainError):
    pass
