import logging
from typing import Iterable, Iterator, Optional

from .backends.base import AbstractAgentBackend, Fragment
from .config import AdAgentConfig
from .core.storage import S3Uploader
from .core.wallet import AgentWallet, save_wallet_data
from .errors import ConfigurationError
from .profiles import CampaignProfile, load_profile
from .tools.base import ToolDescriptor
from .tools.image_generation import ImageGenerator
from .tools.registry import build_tool_registry

logger = logging.getLogger(__name__)


def load_backend(backend_type: str) -> AbstractAgentBackend:
    if backend_type == "agno":
        from .backends.agno_backend import AgnoBackend
        return AgnoBackend()
    elif backend_type == "crewai":
        from .backends.crewai_backend import CrewAIBackend
        return CrewAIBackend()
    raise ConfigurationError(f"Unsupported ai_backend: {backend_type}")


class AdAgentSession:
    """
    A configured conversation with the ad agent.

    Configuration is fixed at construction. Each send() opens a fresh
    response stream; memory carries over between calls for the same
    session id.
    """

    def __init__(
        self,
        backend: AbstractAgentBackend,
        config: AdAgentConfig,
        profile: CampaignProfile,
        tools: Iterable[ToolDescriptor],
        session_id: Optional[str] = None,
    ):
        self.backend = backend
        self.config = config
        self.profile = profile
        self.session_id = session_id or config.session_id
        self.tools = list(tools)

        for tool in self.tools:
            self.backend.register_tool(tool)
        self.backend.initialize(config, profile, self.session_id)

    def send(self, text: str) -> Iterator[Fragment]:
        logger.debug(f"Sending message to session {self.session_id}")
        return self.backend.stream(text)

    def close(self) -> None:
        self.backend.shutdown()


def build_session(
    config: AdAgentConfig,
    profile: Optional[CampaignProfile] = None,
    wallet: Optional[AgentWallet] = None,
    uploader: Optional[S3Uploader] = None,
    image_generator: Optional[ImageGenerator] = None,
    backend: Optional[AbstractAgentBackend] = None,
) -> AdAgentSession:
    """
    Initialize the agent: wallet, storage, tools and runtime.

    The wallet credential file is read before initialization and the
    exported blob is written back once everything else is set up.
    """
    profile = profile or load_profile(config.profile)
    wallet = wallet or AgentWallet.load_or_create(config)
    uploader = uploader or S3Uploader(config.s3)
    image_generator = image_generator or ImageGenerator(config.openai_api_key, model=config.image_model)
    backend = backend or load_backend(config.ai_backend)

    registry = build_tool_registry(wallet, uploader, image_generator, profile, config.network)
    session = AdAgentSession(backend, config, profile, registry)

    # Save wallet data
    save_wallet_data(config.wallet_data_file, wallet.export_data(config.wallet_passphrase))

    logger.info(
        "Agent initialized",
        extra={
            "context": {
                "event_type": "system_startup",
                "profile": profile.name,
                "tags": profile.tags,
                "backend": config.ai_backend,
                "network": config.network_id,
                "wallet": wallet.address,
                "tools": registry.names(),
            }
        },
    )
    return session
