from typing import Any

from pydantic import BaseModel, Field

from ..constants import NetworkInfo
from ..contracts.invoker import invoke_contract
from ..profiles import CampaignProfile
from .base import ToolDescriptor


class CreateAdArgs(BaseModel):
    to: str = Field(description="The recipient address for the ad. e.g. '0x1234...'")
    text: str = Field(description="The text content of the ad. e.g. 'Check out our new product!'")
    title: str = Field(description="The title of the ad. e.g. 'New Product Launch!'")
    imageURL: str = Field(description="The image URL of the ad. e.g. 'https://example.com/image.jpg'")


class CreateAdInput(BaseModel):
    args: CreateAdArgs


def create_ad_tool(wallet: Any, profile: CampaignProfile, network: NetworkInfo) -> ToolDescriptor:
    contract = profile.contract
    tx_url_template = contract.tx_url_template or f"{network.explorer_url}/tx/{{tx_hash}}"
    asset_url_template = contract.asset_url_template or f"{network.marketplace_url}/{{recipient}}"

    def create_ad(params: CreateAdInput) -> str:
        return invoke_contract(
            wallet,
            contract.address,
            contract.method,
            contract.abi,
            params.args.model_dump(),
            tx_url_template=tx_url_template,
            asset_url_template=asset_url_template,
        )

    return ToolDescriptor(
        name="create_ad",
        description=profile.contract_prompt,
        args_schema=CreateAdInput,
        handler=create_ad,
    )
