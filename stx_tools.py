"""
Tool plugin framework.

A plugin turns a wallet client into a list of StacksTool objects. Each tool
carries a pydantic parameter model; arguments are validated (and defaulted)
before the handler runs, so a bad call never reaches the network.
"""

from __future__ import annotations

import abc
import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic import ValidationError as PydanticValidationError

from stx_api import StacksApiClient
from stx_errors import ConfigurationError, ValidationError
from stx_wallet import WalletClient

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Shared parameter types
# ---------------------------------------------------------------------------

RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
OptionalStr = Annotated[str, StringConstraints(strip_whitespace=True)] | None


class ToolParams(BaseModel):
    """Base for tool parameter models. Unknown arguments are ignored."""

    model_config = ConfigDict(extra="ignore")


class NoParams(ToolParams):
    pass


class PaginationParams(ToolParams):
    limit: int = Field(20, ge=1, description="Number of results to return")
    offset: int = Field(0, ge=0, description="Result offset for pagination")


class ContractIdParams(ToolParams):
    contract_id: RequiredStr = Field(
        description="Smart contract ID (format: address.contract-name)"
    )


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------

Handler = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True)
class StacksTool:
    """A named operation: description, parameter model and async handler."""

    name: str
    description: str
    parameters: type[BaseModel]
    handler: Handler

    def input_schema(self) -> dict[str, Any]:
        return self.parameters.model_json_schema()

    def validate(self, arguments: dict[str, Any] | None) -> BaseModel:
        try:
            return self.parameters.model_validate(arguments or {})
        except PydanticValidationError as exc:
            errors = [
                {
                    "field": ".".join(str(part) for part in err["loc"]) or "arguments",
                    "message": err["msg"],
                    "type": err["type"],
                }
                for err in exc.errors()
            ]
            details = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
            raise ValidationError(
                f"Invalid arguments for {self.name}: {details}",
                tool_name=self.name,
                errors=errors,
            ) from exc

    async def run(self, arguments: dict[str, Any] | None = None) -> Any:
        params = self.validate(arguments)
        return await self.handler(params)


def create_tool(
    name: str,
    description: str,
    parameters: type[BaseModel],
    handler: Handler,
) -> StacksTool:
    return StacksTool(name=name, description=description, parameters=parameters, handler=handler)


# ---------------------------------------------------------------------------
# Plugins
# ---------------------------------------------------------------------------


class PluginBase(abc.ABC):
    """Base class for plugins that provide tools."""

    name: ClassVar[str] = "plugin"

    def __init__(self, api: StacksApiClient | None = None) -> None:
        self._api = api

    @property
    def api(self) -> StacksApiClient:
        if self._api is None:
            self._api = StacksApiClient.from_env()
        return self._api

    @abc.abstractmethod
    def get_tools(self, wallet: WalletClient) -> list[StacksTool]:
        """Return the tools provided by this plugin."""

    def supports_wallet_client(self, wallet: WalletClient) -> bool:
        return True

    async def fetch(
        self,
        network: str,
        path: str,
        action: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """GET from the Stacks API without blocking the event loop."""
        return await asyncio.to_thread(self.api.get, network, path, params, action)


def get_tools(wallet: WalletClient, plugins: Sequence[PluginBase]) -> list[StacksTool]:
    """Collect tools from every plugin that supports the wallet client."""
    tools: list[StacksTool] = []
    seen: dict[str, str] = {}

    for plugin in plugins:
        if not plugin.supports_wallet_client(wallet):
            logger.info("Skipping plugin %s: wallet client not supported", plugin.name)
            continue
        for tool in plugin.get_tools(wallet):
            if tool.name in seen:
                raise ConfigurationError(
                    f"Duplicate tool name {tool.name!r} "
                    f"(plugins {seen[tool.name]!r} and {plugin.name!r})"
                )
            seen[tool.name] = plugin.name
            tools.append(tool)

    logger.debug("Loaded %d tools from %d plugins", len(tools), len(plugins))
    return tools
