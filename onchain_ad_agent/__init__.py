from .config import AdAgentConfig
from .agent import AdAgentSession, build_session
from .profiles import CampaignProfile, ContractDescriptor, load_profile
from .contracts import load_abi
from .contracts.invoker import invoke_contract
from .core.storage import S3Uploader
from .core.wallet import AgentWallet
from .tools.base import ToolDescriptor
from .tools.registry import ToolRegistry, build_tool_registry

__all__ = [
    "AdAgentConfig",
    "AdAgentSession",
    "build_session",
    "CampaignProfile",
    "ContractDescriptor",
    "load_profile",
    "load_abi",
    "invoke_contract",
    "S3Uploader",
    "AgentWallet",
    "ToolDescriptor",
    "ToolRegistry",
    "build_tool_registry",
]
