import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Literal, Dict, List, Mapping

from dotenv import load_dotenv

from .constants import (
    DEFAULT_MODEL,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_NETWORK_ID,
    DEFAULT_SESSION_ID,
    NETWORKS,
    NetworkInfo,
    S3_BUCKET,
    S3_PREFIX,
    S3_REGION,
    WALLET_DATA_FILE,
)
from .errors import ConfigurationError, MissingEnvironmentError

logger = logging.getLogger(__name__)

REQUIRED_ENV_VARS = ("OPENAI_API_KEY", "RPC_API_KEY", "WALLET_PASSPHRASE")


def missing_environment(env: Optional[Mapping[str, str]] = None) -> List[str]:
    """Returns the required variable names that are unset or empty, in declaration order."""
    env = os.environ if env is None else env
    return [name for name in REQUIRED_ENV_VARS if not env.get(name)]


def validate_environment(env: Optional[Mapping[str, str]] = None) -> None:
    """
    Validates that required environment variables are set.

    Raises MissingEnvironmentError listing every missing name. Warns when
    NETWORK_ID is not set.
    """
    env = os.environ if env is None else env
    missing = missing_environment(env)
    if missing:
        raise MissingEnvironmentError(missing)

    if not env.get("NETWORK_ID"):
        logger.warning("NETWORK_ID not set, defaulting to %s testnet", DEFAULT_NETWORK_ID)


@dataclass
class S3Config:
    """Object storage settings. Credentials fall back to boto3's default chain when unset."""
    bucket: str = S3_BUCKET
    region: str = S3_REGION
    prefix: str = S3_PREFIX
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    fetch_timeout_seconds: int = 30

    @property
    def has_credentials(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)


@dataclass
class AdAgentConfig:
    """
    Runtime configuration for the ad agent.

    Required:
    - openai_api_key: used by the language model and image generation
    - rpc_api_key: node provider key filled into the network RPC URL template
    - wallet_passphrase: encrypts the persisted wallet credential blob

    Everything else has a default; see from_env() for the variable names.
    """

    openai_api_key: str
    rpc_api_key: str
    wallet_passphrase: str

    network_id: str = DEFAULT_NETWORK_ID
    rpc_url: Optional[str] = None

    # --- Backend Configuration ---
    ai_backend: Literal["agno", "crewai"] = "agno"
    model: str = DEFAULT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    temperature: Optional[float] = None

    # Conversation memory
    session_id: str = DEFAULT_SESSION_ID
    session_db_path: Optional[str] = None

    # Local persistence
    wallet_data_file: str = WALLET_DATA_FILE

    # Campaign profile (built-in name or path to a JSON file)
    profile: str = "ad-strategist"

    s3: S3Config = field(default_factory=S3Config)

    # Contract confirmation timeout
    receipt_timeout_seconds: int = 120

    # Generic extra config for backends
    backend_options: Dict[str, object] = field(default_factory=dict)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "AdAgentConfig":
        if env is None:
            load_dotenv()
            env = os.environ
        validate_environment(env)

        s3 = S3Config(
            bucket=env.get("AD_S3_BUCKET", S3_BUCKET),
            region=env.get("AD_S3_REGION", S3_REGION),
            prefix=env.get("AD_S3_PREFIX", S3_PREFIX),
            access_key_id=env.get("AWS_ACCESS_KEY_ID") or env.get("NEXT_PUBLIC_AWS_ACCESS_KEY_ID"),
            secret_access_key=env.get("AWS_SECRET_ACCESS_KEY") or env.get("NEXT_PUBLIC_AWS_SECRET_ACCESS_KEY"),
        )

        config = cls(
            openai_api_key=env["OPENAI_API_KEY"],
            rpc_api_key=env["RPC_API_KEY"],
            wallet_passphrase=env["WALLET_PASSPHRASE"],
            network_id=env.get("NETWORK_ID") or DEFAULT_NETWORK_ID,
            rpc_url=env.get("RPC_URL") or None,
            ai_backend=env.get("AI_BACKEND", "agno"),
            model=env.get("OPENAI_MODEL", DEFAULT_MODEL),
            session_id=env.get("AD_AGENT_SESSION_ID", DEFAULT_SESSION_ID),
            session_db_path=env.get("AD_AGENT_SESSION_DB") or None,
            wallet_data_file=env.get("WALLET_DATA_FILE", WALLET_DATA_FILE),
            profile=env.get("AD_AGENT_PROFILE", "ad-strategist"),
            s3=s3,
        )
        config.validate()
        return config

    @property
    def network(self) -> NetworkInfo:
        try:
            return NETWORKS[self.network_id]
        except KeyError:
            raise ConfigurationError(
                f"Unsupported network: {self.network_id}. Choose one of: {', '.join(NETWORKS)}"
            )

    def resolve_rpc_url(self) -> str:
        if self.rpc_url:
            return self.rpc_url
        return self.network.rpc_url_template.format(api_key=self.rpc_api_key)

    def validate(self) -> None:
        if self.ai_backend not in ("agno", "crewai"):
            raise ConfigurationError(f"Unsupported ai_backend: {self.ai_backend}")
        # Raises for unknown networks
        self.network
