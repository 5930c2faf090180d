from dataclasses import dataclass

# Network Constants (Default: Base Sepolia)
# RPC URLs are templates filled with RPC_API_KEY; RPC_URL overrides them entirely.

DEFAULT_NETWORK_ID = "base-sepolia"


@dataclass(frozen=True)
class NetworkInfo:
    network_id: str
    chain_id: int
    rpc_url_template: str
    explorer_url: str
    marketplace_url: str


NETWORKS = {
    "base-sepolia": NetworkInfo(
        network_id="base-sepolia",
        chain_id=84532,
        rpc_url_template="https://base-sepolia.g.alchemy.com/v2/{api_key}",
        explorer_url="https://sepolia.basescan.org",
        marketplace_url="https://testnets.opensea.io",
    ),
    "base-mainnet": NetworkInfo(
        network_id="base-mainnet",
        chain_id=8453,
        rpc_url_template="https://base-mainnet.g.alchemy.com/v2/{api_key}",
        explorer_url="https://basescan.org",
        marketplace_url="https://opensea.io",
    ),
    "ethereum-sepolia": NetworkInfo(
        network_id="ethereum-sepolia",
        chain_id=11155111,
        rpc_url_template="https://eth-sepolia.g.alchemy.com/v2/{api_key}",
        explorer_url="https://sepolia.etherscan.io",
        marketplace_url="https://testnets.opensea.io",
    ),
}

# --- CONTRACTS ---
AD_CONTRACT_ADDRESS = "0xF714043eE1176B16dd6C9E9beB260D6b4D8eab95"

# --- OBJECT STORAGE ---
S3_BUCKET = "placeholderads"
S3_REGION = "ap-south-1"
S3_PREFIX = "ad-images/"
S3_CONTENT_TYPE = "image/png"
S3_EXTENSION = ".png"

# --- RUNTIME ---
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_IMAGE_MODEL = "dall-e-3"
DEFAULT_SESSION_ID = "ad-strategist-chat"
WALLET_DATA_FILE = "wallet_data.txt"
AUTONOMOUS_INTERVAL_SECONDS = 10

FRAGMENT_SEPARATOR = "-------------------"
