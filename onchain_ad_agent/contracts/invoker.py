import logging
from typing import Any, Dict, List, Optional

from web3 import Web3

logger = logging.getLogger(__name__)

DEFAULT_TX_URL_TEMPLATE = "https://sepolia.basescan.org/tx/{tx_hash}"
DEFAULT_ASSET_URL_TEMPLATE = "https://testnets.opensea.io/{recipient}"

HASH_UNAVAILABLE_MESSAGE = "Contract invocation completed, but transaction hash is not available"
UNKNOWN_ERROR_MESSAGE = "Failed to publish ad due to an unknown error"


def find_method_abi(abi: List[Dict[str, Any]], method: str) -> Optional[Dict[str, Any]]:
    for item in abi:
        if item.get("name") == method:
            return item
    return None


def _receipt_tx_hash(receipt: Any) -> Optional[str]:
    if receipt is None:
        return None
    if hasattr(receipt, "get"):
        tx_hash = receipt.get("transactionHash")
    else:
        tx_hash = getattr(receipt, "transaction_hash", None)
    if not tx_hash:
        return None
    if isinstance(tx_hash, (bytes, bytearray)):
        return Web3.to_hex(tx_hash)
    return str(tx_hash)


def invoke_contract(
    wallet: Any,
    contract_address: str,
    method: str,
    abi: List[Dict[str, Any]],
    args: Dict[str, Any],
    tx_url_template: str = DEFAULT_TX_URL_TEMPLATE,
    asset_url_template: str = DEFAULT_ASSET_URL_TEMPLATE,
) -> str:
    """
    Submits a contract write through the wallet and waits for its receipt.

    Never raises: every failure is turned into a message the agent can relay
    to the user.
    """
    try:
        method_abi = find_method_abi(abi, method)
        if not method_abi:
            raise ValueError(f"Method {method} not found in ABI")

        logger.info(
            f"Invoking {method} on {contract_address}",
            extra={"context": {"event_type": "contract_invocation", "method": method, "contract": contract_address}},
        )
        invocation = wallet.invoke_contract(
            contract_address=contract_address,
            method=method,
            args=args,
            abi=abi,
        )

        receipt = invocation.wait()
        tx_hash = _receipt_tx_hash(receipt)

        if not tx_hash:
            logger.warning(f"{method} confirmed without a transaction hash")
            return HASH_UNAVAILABLE_MESSAGE

        tx_url = tx_url_template.format(tx_hash=tx_hash)
        asset_url = asset_url_template.format(recipient=args.get("to", ""))
        logger.info(f"{method} confirmed in {tx_hash}")
        return f"Ad Created successfully. Transaction hash: {tx_url} \n {asset_url}"
    except Exception as e:
        logger.error(f"Contract invocation failed: {e}", extra={"context": {"method": method}})
        if str(e):
            return f"Failed to publish ad: {e}"
        return UNKNOWN_ERROR_MESSAGE
