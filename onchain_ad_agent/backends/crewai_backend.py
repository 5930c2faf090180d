import logging
from typing import Any, Callable, Iterator, List, Optional, Tuple, Type

from crewai import Agent, Crew, LLM, Process, Task
from crewai.tools import BaseTool
from pydantic import BaseModel, ConfigDict

from ..config import AdAgentConfig
from ..errors import AgentRuntimeError
from ..profiles import CampaignProfile
from ..tools.base import ToolDescriptor
from .base import AbstractAgentBackend, Fragment

logger = logging.getLogger(__name__)


class DescriptorTool(BaseTool):
    """CrewAI adapter around a ToolDescriptor."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: str
    args_schema: Type[BaseModel]
    descriptor: Callable[..., str]

    def _run(self, **kwargs: Any) -> str:
        logger.info(f"Tool call: {self.name}", extra={"context": {"event_type": "tool_call", "tool": self.name}})
        return self.descriptor(**kwargs)


def to_crewai_tool(tool: ToolDescriptor) -> DescriptorTool:
    return DescriptorTool(
        name=tool.name,
        description=tool.description,
        args_schema=tool.args_schema,
        descriptor=tool,
    )


class CrewAIBackend(AbstractAgentBackend):
    """
    Backend adapter for CrewAI.

    A crew run is not streamed, so each turn yields a single agent fragment.
    """

    def __init__(self):
        super().__init__()
        self.crew_agent: Optional[Agent] = None
        self.config: Optional[AdAgentConfig] = None
        self.profile: Optional[CampaignProfile] = None
        self.session_id: Optional[str] = None
        # (speaker, text) pairs for this session, replayed into each task
        self.transcript: List[Tuple[str, str]] = []

    def initialize(self, config: AdAgentConfig, profile: CampaignProfile, session_id: str) -> None:
        self.config = config
        self.profile = profile
        self.session_id = session_id
        self.transcript = []

    def _build_agent(self) -> Agent:
        if self.config is None:
            raise AgentRuntimeError("CrewAI backend used before initialize()")

        llm_kwargs = {"model": f"openai/{self.config.model}", "api_key": self.config.openai_api_key}
        if self.config.temperature is not None:
            llm_kwargs["temperature"] = self.config.temperature

        return Agent(
            role=self.config.backend_options.get("role", "Ad Strategist"),
            goal=self.config.backend_options.get("goal", "Design and publish on-chain ads with the user."),
            backstory=self.profile.persona_prompt,
            llm=LLM(**llm_kwargs),
            tools=[to_crewai_tool(t) for t in self.tools],
            verbose=False,
            allow_delegation=False,
        )

    def _task_description(self, prompt: str) -> str:
        if not self.transcript:
            return prompt
        history = "\n".join(f"{speaker}: {text}" for speaker, text in self.transcript)
        return f"Conversation so far:\n{history}\n\nUser: {prompt}"

    def stream(self, prompt: str) -> Iterator[Fragment]:
        if self.crew_agent is None:
            self.crew_agent = self._build_agent()

        task = Task(
            description=self._task_description(prompt),
            agent=self.crew_agent,
            expected_output="The next reply to the user in the ad design conversation.",
        )
        crew = Crew(
            agents=[self.crew_agent],
            tasks=[task],
            process=Process.sequential,
        )
        result = str(crew.kickoff())

        self.transcript.append(("User", prompt))
        self.transcript.append(("Assistant", result))
        yield Fragment("agent", result)
