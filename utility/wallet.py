from typing import List, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from base.errors import ConfigurationError


class WalletHelper:

    def resolve_account(self, private_key: str) -> LocalAccount:
        try:
            return Account.from_key(private_key)
        except (ValueError, TypeError) as ex:
            raise ConfigurationError("Signing key is malformed") from ex

    def resolve_address(self, private_key: str) -> str:
        return self.resolve_account(private_key).address

    def load_private_keys(self, file_path: str) -> List[str]:
        with open(file_path, 'r') as file:
            keys = file.read().splitlines()
            filtered = [s.strip() for s in keys if s.strip()]
            return filtered

    def load_signer(self, private_key: Optional[str], key_file: Optional[str] = None) -> LocalAccount:
        """ Method that returns the signing account. The first key of key_file wins over private_key """

        if key_file:
            keys = self.load_private_keys(key_file)
            if not keys:
                raise ConfigurationError(f"No private keys found in {key_file}")
            private_key = keys[0]

        if not private_key:
            raise ConfigurationError("Signing key is not configured. Set PAYMEE_PRIVATE_KEY or pass --keys")

        return self.resolve_account(private_key)
