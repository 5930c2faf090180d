import os
import json
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from eth_account import Account
from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from ..config import AdAgentConfig
from ..constants import NetworkInfo
from ..errors import ContractRevertedError, WalletError

logger = logging.getLogger(__name__)


def read_wallet_data(path: str) -> Optional[str]:
    """Returns the persisted credential blob, or None when there is none or it cannot be read."""
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read() or None
    except OSError as e:
        logger.error(f"Error reading wallet data: {e}")
        # Continue without wallet data
        return None


def save_wallet_data(path: str, wallet_data: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(wallet_data)


class ContractInvocation:
    """A submitted transaction that can be waited on for its receipt."""

    def __init__(self, w3: Web3, tx_hash: str, timeout: int = 120):
        self.w3 = w3
        self.transaction_hash = tx_hash
        self.timeout = timeout

    def wait(self, timeout: Optional[int] = None):
        receipt = self.w3.eth.wait_for_transaction_receipt(self.transaction_hash, timeout=timeout or self.timeout)
        if receipt.get("status") == 0:
            raise ContractRevertedError(self.transaction_hash)
        return receipt


class AgentWallet:
    """
    Signing wallet for the agent on a single EVM network.

    The private key never leaves the process in plain text: export_data()
    returns an encrypted keystore blob that load_or_create() reads back.
    """

    def __init__(self, w3: Web3, private_key: str, network: NetworkInfo, receipt_timeout: int = 120):
        self.w3 = w3
        self.network = network
        self.receipt_timeout = receipt_timeout
        self._account = Account.from_key(private_key)
        self.address = self._account.address

    @classmethod
    def from_wallet_data(
        cls,
        wallet_data: Optional[str],
        passphrase: str,
        w3: Web3,
        network: NetworkInfo,
        receipt_timeout: int = 120,
    ) -> "AgentWallet":
        if wallet_data:
            try:
                private_key = Account.decrypt(json.loads(wallet_data), passphrase).hex()
            except (ValueError, KeyError, TypeError) as e:
                raise WalletError(f"Could not decrypt wallet data: {e}")
        else:
            logger.info("No wallet data found, creating a new wallet")
            private_key = Account.create().key.hex()
        return cls(w3, private_key, network, receipt_timeout)

    @classmethod
    def load_or_create(cls, config: AdAgentConfig, w3: Optional[Web3] = None) -> "AgentWallet":
        """
        Reads the credential file (if any) and restores or creates the wallet.
        The caller writes export_data() back once initialization is complete.
        """
        if w3 is None:
            w3 = Web3(Web3.HTTPProvider(config.resolve_rpc_url()))
            w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        wallet_data = read_wallet_data(config.wallet_data_file)
        wallet = cls.from_wallet_data(
            wallet_data,
            config.wallet_passphrase,
            w3,
            config.network,
            receipt_timeout=config.receipt_timeout_seconds,
        )
        logger.info(
            f"Wallet ready: {wallet.address}",
            extra={"context": {"event_type": "wallet_initialization", "network": config.network_id}},
        )
        return wallet

    def export_data(self, passphrase: str) -> str:
        return json.dumps(Account.encrypt(self._account.key, passphrase))

    def details(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "network_id": self.network.network_id,
            "chain_id": self.network.chain_id,
        }

    def get_balance(self) -> Decimal:
        """Native balance in ether."""
        balance_wei = self.w3.eth.get_balance(self.address)
        return Decimal(Web3.from_wei(balance_wei, "ether"))

    def _send(self, tx: Dict[str, Any]) -> ContractInvocation:
        signed_tx = self._account.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        return ContractInvocation(self.w3, self.w3.to_hex(tx_hash), self.receipt_timeout)

    def _tx_params(self, value: int = 0) -> Dict[str, Any]:
        return {
            "from": self.address,
            "chainId": self.network.chain_id,
            "nonce": self.w3.eth.get_transaction_count(self.address),
            "value": value,
        }

    def invoke_contract(
        self,
        contract_address: str,
        method: str,
        args: Dict[str, Any],
        abi: List[Dict[str, Any]],
    ) -> ContractInvocation:
        """Builds, signs and sends a call to `method`, with `args` keyed by ABI input name."""
        func_abi = next((i for i in abi if i.get("name") == method), None)
        if func_abi is None:
            raise WalletError(f"Method {method} not found in ABI")

        # Prepare arguments in order
        ordered_args = []
        for input_def in func_abi.get("inputs", []):
            name = input_def["name"]
            if name not in args:
                raise WalletError(f"Missing argument '{name}' for {method}")
            value = args[name]
            if input_def.get("type") == "address" and isinstance(value, str):
                value = Web3.to_checksum_address(value)
            ordered_args.append(value)

        contract = self.w3.eth.contract(address=Web3.to_checksum_address(contract_address), abi=abi)
        tx = contract.functions[method](*ordered_args).build_transaction(self._tx_params())
        invocation = self._send(tx)
        logger.info(f"Sent {method} to {contract_address}: {invocation.transaction_hash}")
        return invocation

    def transfer(self, to: str, amount_eth: Decimal) -> ContractInvocation:
        tx = self._tx_params(value=Web3.to_wei(amount_eth, "ether"))
        tx["to"] = Web3.to_checksum_address(to)
        tx["gas"] = 21000
        tx["gasPrice"] = self.w3.eth.gas_price
        return self._send(tx)
