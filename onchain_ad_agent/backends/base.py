from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, List, Literal

from ..config import AdAgentConfig
from ..profiles import CampaignProfile
from ..tools.base import ToolDescriptor


@dataclass
class Fragment:
    """A piece of a streamed response: model speech or a tool result."""
    kind: Literal["agent", "tools"]
    content: str


class AbstractAgentBackend(ABC):
    """
    Interface for the hosted reasoning runtimes (Agno, CrewAI).
    """

    def __init__(self):
        self.tools: List[ToolDescriptor] = []

    @abstractmethod
    def initialize(self, config: AdAgentConfig, profile: CampaignProfile, session_id: str) -> None:
        """
        Initialize the backend with config, the campaign script and the conversation key.
        """
        pass

    def register_tool(self, tool: ToolDescriptor) -> None:
        """
        Make a tool available to the runtime. Must be called before the first stream().
        """
        self.tools.append(tool)

    @abstractmethod
    def stream(self, prompt: str) -> Iterator[Fragment]:
        """
        Send a user message and yield response fragments in arrival order.
        """
        pass

    def shutdown(self) -> None:
        """
        Cleanup resources if needed.
        """
        pass
