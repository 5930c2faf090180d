import json
import logging
from decimal import Decimal
from typing import Any, List

from pydantic import BaseModel, Field

from .base import ToolDescriptor

logger = logging.getLogger(__name__)


class NoInput(BaseModel):
    pass


class TransferInput(BaseModel):
    to: str = Field(description="The destination address. e.g. '0x1234...'")
    amount: Decimal = Field(gt=0, description="Amount of the native asset in ether units. e.g. 0.01")


def create_wallet_tools(wallet: Any) -> List[ToolDescriptor]:
    """Generic wallet operations. Failures come back as text so the agent can explain them."""

    def get_wallet_details(params: NoInput) -> str:
        return json.dumps(wallet.details())

    def get_balance(params: NoInput) -> str:
        try:
            balance = wallet.get_balance()
        except Exception as e:
            logger.error(f"Balance lookup failed: {e}")
            return f"Error getting balance: {e}"
        return f"Balance of {wallet.address}: {balance} ETH"

    def transfer(params: TransferInput) -> str:
        try:
            receipt = wallet.transfer(params.to, params.amount).wait()
        except Exception as e:
            logger.error(f"Transfer failed: {e}")
            return f"Error transferring {params.amount} ETH to {params.to}: {e}"
        tx_hash = receipt.get("transactionHash")
        if isinstance(tx_hash, (bytes, bytearray)):
            tx_hash = "0x" + bytes(tx_hash).hex()
        return f"Transferred {params.amount} ETH to {params.to}. Transaction hash: {tx_hash}"

    return [
        ToolDescriptor(
            name="get_wallet_details",
            description="Returns the agent wallet address, network id and chain id.",
            args_schema=NoInput,
            handler=get_wallet_details,
        ),
        ToolDescriptor(
            name="get_balance",
            description="Returns the native asset balance of the agent wallet in ETH.",
            args_schema=NoInput,
            handler=get_balance,
        ),
        ToolDescriptor(
            name="transfer",
            description="Transfers the native asset (ETH) from the agent wallet to another address.",
            args_schema=TransferInput,
            handler=transfer,
        ),
    ]
