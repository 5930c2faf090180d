import os
import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class AbiParam(BaseModel):
    name: str
    type: str
    internalType: Optional[str] = None


class AbiFunction(BaseModel):
    """A callable contract method as described by an ABI entry."""
    name: str
    type: str = "function"
    inputs: List[AbiParam]
    outputs: Optional[List[AbiParam]] = None
    stateMutability: Optional[str] = None


def load_abi(contract_name: str) -> List[Dict[str, Any]]:
    """
    Loads the ABI for a given contract name from the package resources.
    """
    if not contract_name.endswith(".json"):
        contract_name += ".json"

    abi_path = os.path.join(os.path.dirname(__file__), "abis", contract_name)

    if not os.path.exists(abi_path):
        raise FileNotFoundError(f"ABI for {contract_name} not found at {abi_path}")

    with open(abi_path, "r") as f:
        artifact = json.load(f)
        return artifact.get("abi", artifact) if isinstance(artifact, dict) else artifact


def parse_abi(abi: List[Dict[str, Any]]) -> List[AbiFunction]:
    """Validates the function entries of an ABI table. Events and errors are skipped."""
    return [AbiFunction.model_validate(item) for item in abi if item.get("type") == "function"]
