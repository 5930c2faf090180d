"""
Campaign profiles.

A profile bundles the conversational script with the contract it publishes
to, so program variants differ only in data.
"""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .constants import AD_CONTRACT_ADDRESS
from .contracts import load_abi, parse_abi
from .errors import ProfileError

AD_STRATEGIST_PERSONA = """
You are a creative Ad Strategist that helps create viral campaigns through conversation. Never ask direct questions about ad components. Follow this flow:

You should ONLY ask the user 3 short questions.

1. INITIAL DISCOVERY:
   "What are you looking to promote today?" → Extract product essence
   "What makes this different from competitors?" → Identify unique value prop

2. AUDIENCE RAPPORT:
   "Imagine your ideal customer seeing this ad - what would stop them mid-scroll?" → Determine hooks
   "What problem does this solve for them?" → Identify pain points

3. CREATIVE ALIGNMENT:
   "Should we lean more into [benefit X] or [feature Y]?" → Gauge emphasis
   "Between these two vibes, which resonates more?" + show sample tone options

4. VISUAL BRAINSTORM:
   Generate 2-3 image style options based on convo ("Should the visual feel more [option A] or [option B]?")
   Use the generate_image tool automatically after style consensus

5. FINAL REVIEW:
   Show complete ad preview with:
   - Generated title
   - Marketing copy
   - Image description
   "Ready to publish? Type YES or suggest changes"

Technical Rules:
- Always call 'upload_to_s3' after image generation
- Verify S3 URL exists before contract call
- If missing data, ask clarifying questions
- On 5XX errors: "Let me try that again..."

You are a helpful agent that can interact onchain using your wallet tools.
You will not tell the user wallet details unless explicitly asked.
If you ever need funds, provide your wallet details and request funds from the user.
If there is a 5XX (internal) HTTP error code, ask the user to try again later.
If someone asks you to do something you can't do with your currently available tools, you must say so. Refrain from
restating your tools' descriptions unless it is explicitly requested.
"""

CREATE_AD_PROMPT = """
Use this tool to create a new ad on the decentralized advertising contract.

Final contract checklist:
- Title: {generated_title} (from value proposition)
- Text: {marketing_hook} (from pain points)
- Image: {s3_url} (auto-generated)
- Recipient: [user-provided]

ALWAYS follow these steps before invoking:
1. Summarize key selling points
2. Show formatted ad preview
3. Ask "Does this capture your vision? YES to publish, NO to adjust"
4. Only proceed on explicit YES

The user only needs to supply the recipient address. All other details (title, text, image URL) should come from the conversation or from your own logic/tools. If you need clarification or confirmation, ask the user before invoking this tool. Once you've finalized the ad details, the contract call will return a transaction result.
"""

AUTONOMOUS_INSTRUCTION = (
    "Be creative and do something interesting on the blockchain. "
    "Choose an action or set of actions and execute it that highlights your abilities."
)


@dataclass
class ContractDescriptor:
    address: str
    abi: List[Dict[str, Any]]
    method: str = "createAd"
    # None means derive from the network explorer / marketplace
    tx_url_template: Optional[str] = None
    asset_url_template: Optional[str] = None

    def validate(self) -> None:
        try:
            functions = parse_abi(self.abi)
        except ValidationError as e:
            raise ProfileError(f"Invalid contract ABI: {e}")
        if not any(f.name == self.method for f in functions):
            raise ProfileError(f"Method {self.method} not found in contract ABI")


@dataclass
class CampaignProfile:
    name: str
    persona_prompt: str
    contract_prompt: str
    contract: ContractDescriptor
    autonomous_instruction: str = AUTONOMOUS_INSTRUCTION
    tags: List[str] = field(default_factory=list)


def ad_strategist_profile() -> CampaignProfile:
    return CampaignProfile(
        name="ad-strategist",
        persona_prompt=AD_STRATEGIST_PERSONA,
        contract_prompt=CREATE_AD_PROMPT,
        contract=ContractDescriptor(address=AD_CONTRACT_ADDRESS, abi=load_abi("AdContract")),
    )


BUILTIN_PROFILES = {
    "ad-strategist": ad_strategist_profile,
}


def _profile_from_file(path: str) -> CampaignProfile:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    try:
        contract_data = data["contract"]
        abi = contract_data["abi"]
        if isinstance(abi, str):
            abi = load_abi(abi)
        contract = ContractDescriptor(
            address=contract_data["address"],
            abi=abi,
            method=contract_data.get("method", "createAd"),
            tx_url_template=contract_data.get("tx_url_template"),
            asset_url_template=contract_data.get("asset_url_template"),
        )
        return CampaignProfile(
            name=data.get("name", os.path.splitext(os.path.basename(path))[0]),
            persona_prompt=data["persona_prompt"],
            contract_prompt=data.get("contract_prompt", CREATE_AD_PROMPT),
            contract=contract,
            autonomous_instruction=data.get("autonomous_instruction", AUTONOMOUS_INSTRUCTION),
            tags=data.get("tags", []),
        )
    except KeyError as e:
        raise ProfileError(f"Profile {path} is missing required field {e}")


def load_profile(name_or_path: str) -> CampaignProfile:
    """
    Resolve a campaign profile by built-in name or JSON file path.

    A JSON profile needs `persona_prompt` and `contract.address` / `contract.abi`
    (an inline ABI list or the name of a bundled ABI). Other fields default to
    the ad-strategist values.
    """
    if name_or_path in BUILTIN_PROFILES:
        profile = BUILTIN_PROFILES[name_or_path]()
    elif os.path.exists(name_or_path):
        profile = _profile_from_file(name_or_path)
    else:
        raise ProfileError(
            f"Unknown profile '{name_or_path}'. Built-in profiles: {', '.join(BUILTIN_PROFILES)}"
        )
    profile.contract.validate()
    return profile
