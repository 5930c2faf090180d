import logging
from typing import Iterator, List, Optional

from agno.agent import Agent
from agno.db.in_memory import InMemoryDb
from agno.db.sqlite import SqliteDb
from agno.models.openai import OpenAIChat
from agno.run.agent import RunEvent
from agno.tools.function import Function

from ..config import AdAgentConfig
from ..errors import AgentRuntimeError
from ..profiles import CampaignProfile
from ..tools.base import ToolDescriptor
from .base import AbstractAgentBackend, Fragment

logger = logging.getLogger(__name__)


def to_agno_function(tool: ToolDescriptor) -> Function:
    def entrypoint(**kwargs):
        logger.info(f"Tool call: {tool.name}", extra={"context": {"event_type": "tool_call", "tool": tool.name}})
        return tool(**kwargs)

    return Function(
        name=tool.name,
        description=tool.description,
        parameters=tool.parameters(),
        entrypoint=entrypoint,
        skip_entrypoint_processing=True,
    )


class AgnoBackend(AbstractAgentBackend):
    """
    Backend for the Agno agent runtime.

    Conversation history lives in the Agno db under the session id, so every
    stream() call continues the same conversation.
    """

    def __init__(self):
        super().__init__()
        self.agent: Optional[Agent] = None
        self.config: Optional[AdAgentConfig] = None
        self.profile: Optional[CampaignProfile] = None
        self.session_id: Optional[str] = None

    def initialize(self, config: AdAgentConfig, profile: CampaignProfile, session_id: str) -> None:
        self.config = config
        self.profile = profile
        self.session_id = session_id

    def _build_agent(self) -> Agent:
        if self.config is None:
            raise AgentRuntimeError("Agno backend used before initialize()")

        model_kwargs = {"id": self.config.model, "api_key": self.config.openai_api_key}
        if self.config.temperature is not None:
            model_kwargs["temperature"] = self.config.temperature

        if self.config.session_db_path:
            db = SqliteDb(db_file=self.config.session_db_path)
        else:
            db = InMemoryDb()

        return Agent(
            name=self.profile.name,
            model=OpenAIChat(**model_kwargs),
            instructions=self.profile.persona_prompt,
            tools=[to_agno_function(t) for t in self.tools],
            db=db,
            session_id=self.session_id,
            add_history_to_context=True,
            markdown=False,
        )

    def stream(self, prompt: str) -> Iterator[Fragment]:
        if self.agent is None:
            self.agent = self._build_agent()

        # Content arrives as token deltas; one agent fragment is emitted per reasoning step
        buffer: List[str] = []

        def flush() -> Iterator[Fragment]:
            text = "".join(buffer).strip()
            buffer.clear()
            if text:
                yield Fragment("agent", text)

        for event in self.agent.run(prompt, stream=True, stream_events=True, session_id=self.session_id):
            kind = getattr(event, "event", None)
            if kind == RunEvent.run_content.value:
                if event.content:
                    buffer.append(str(event.content))
            elif kind == RunEvent.tool_call_started.value:
                yield from flush()
            elif kind == RunEvent.tool_call_completed.value:
                yield from flush()
                tool = getattr(event, "tool", None)
                result = tool.result if tool is not None else event.content
                yield Fragment("tools", "" if result is None else str(result))
            elif kind == RunEvent.run_error.value:
                raise AgentRuntimeError(str(event.content or "Agent run failed"))

        yield from flush()
