from dataclasses import dataclass
from typing import Any, Callable, Dict, Type

from pydantic import BaseModel


@dataclass
class ToolDescriptor:
    """
    A named capability the reasoning runtime may call.

    The description doubles as the instruction the model reads when deciding
    whether to call the tool. Calling the descriptor validates keyword
    arguments against args_schema and passes the parsed model to the handler.
    """

    name: str
    description: str
    args_schema: Type[BaseModel]
    handler: Callable[[Any], str]

    def __call__(self, **kwargs: Any) -> str:
        params = self.args_schema.model_validate(kwargs)
        return self.handler(params)

    def parameters(self) -> Dict[str, Any]:
        """JSON schema of the tool input."""
        return self.args_schema.model_json_schema()
