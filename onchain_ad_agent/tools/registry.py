import logging
from typing import Any, Iterable, Iterator, List, Optional

from ..constants import NetworkInfo
from ..core.storage import S3Uploader
from ..profiles import CampaignProfile
from .base import ToolDescriptor
from .create_ad import create_ad_tool
from .image_generation import ImageGenerator, create_image_generation_tool
from .s3_upload import create_s3_upload_tool
from .wallet_tools import create_wallet_tools

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Ordered collection of tools handed to the agent runtime.

    Registration never invokes a tool. Duplicate names are logged, not rejected.
    """

    def __init__(self, tools: Optional[Iterable[ToolDescriptor]] = None):
        self._tools: List[ToolDescriptor] = []
        if tools:
            self.extend(tools)

    def register(self, tool: ToolDescriptor) -> None:
        if tool.name in self.names():
            logger.warning(f"Duplicate tool name registered: {tool.name}")
        self._tools.append(tool)

    def extend(self, tools: Iterable[ToolDescriptor]) -> None:
        for tool in tools:
            self.register(tool)

    def names(self) -> List[str]:
        return [t.name for t in self._tools]

    def get(self, name: str) -> Optional[ToolDescriptor]:
        return next((t for t in self._tools if t.name == name), None)

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(list(self._tools))

    def __len__(self) -> int:
        return len(self._tools)


def build_tool_registry(
    wallet: Any,
    uploader: S3Uploader,
    image_generator: ImageGenerator,
    profile: CampaignProfile,
    network: NetworkInfo,
) -> ToolRegistry:
    registry = ToolRegistry()
    registry.extend(create_wallet_tools(wallet))
    registry.register(create_image_generation_tool(image_generator))
    registry.register(create_s3_upload_tool(uploader))
    registry.register(create_ad_tool(wallet, profile, network))
    logger.info(f"Registered tools: {registry.names()}")
    return registry
