from typing import List


class AdAgentError(Exception):
    """Base error for the ad agent."""


class ConfigurationError(AdAgentError):
    pass


class MissingEnvironmentError(ConfigurationError):
    """Raised when required environment variables are not set."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__("Required environment variables are not set: " + ", ".join(self.missing))


class ProfileError(ConfigurationError):
    pass


class UploadError(AdAgentError):
    """Raised when an image cannot be fetched or stored."""


class WalletError(AdAgentError):
    pass


class ContractRevertedError(WalletError):
    def __init__(self, tx_hash: str):
        self.tx_hash = tx_hash
        super().__init__(f"Transaction {tx_hash} reverted")


class AgentRuntimeError(AdAgentError):
    """Raised when the reasoning runtime reports a failed run."""
