"""
Read-only MCP resources: Foundry docs and views of the configured project.

Static resources are addressed by fixed ``foundry://`` URIs; the contract
templates (``foundry://abi/{contract}`` and friends) map to one
``forge inspect`` field each.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

from foundry_mcp.context import ToolContext
from foundry_mcp.docs import DocsFetchError
from foundry_mcp.tools.validators import is_valid_contract

logger = logging.getLogger(__name__)

SCHEME = "foundry://"
TEXT = "text/plain"
JSON = "application/json"


class ResourceNotFound(LookupError):
    """Raised for URIs that match no resource or template."""


@dataclass(slots=True)
class ResourceDefinition:
    uri: str
    name: str
    description: str
    mime_type: str
    reader: Callable[[ToolContext], Awaitable[str]]


@dataclass(slots=True)
class ResourceTemplate:
    prefix: str
    name: str
    description: str
    mime_type: str
    inspect_field: str

    @property
    def uri_template(self) -> str:
        return f"{SCHEME}{self.prefix}/{{contract}}"


async def _read_docs(ctx: ToolContext) -> str:
    try:
        return await ctx.docs.get()  # type: ignore[union-attr]
    except DocsFetchError as exc:
        logger.warning("docs unavailable: %s", exc)
        return (
            f"Failed to fetch documentation: {exc}\n\n"
            "You can access the documentation directly at:\n"
            f"- Full LLM docs: {ctx.config.docs_url}\n"
            f"- Web docs: {ctx.config.docs_base_url}"
        )


def docs_links(docs_url: str, base_url: str) -> Dict[str, Any]:
    return {
        "main": base_url,
        "llm_full": docs_url,
        "sections": {
            "forge": f"{base_url}/forge",
            "cast": f"{base_url}/cast",
            "anvil": f"{base_url}/anvil",
            "chisel": f"{base_url}/chisel",
            "reference": {
                "forge": f"{base_url}/forge/reference",
                "cast": f"{base_url}/cast/reference",
                "anvil": f"{base_url}/anvil/reference",
                "cheatcodes": f"{base_url}/cheatcodes",
            },
        },
        "note": (
            "The help tools (forge_help, cast_help, anvil_help, chisel_help) read the "
            "CLI documentation of the installed binaries directly."
        ),
    }


async def _read_docs_links(ctx: ToolContext) -> str:
    return json.dumps(docs_links(ctx.config.docs_url, ctx.config.docs_base_url), indent=2)


async def _read_config(ctx: ToolContext) -> str:
    path = Path(ctx.project_path) / "foundry.toml"
    if not path.is_file():
        return "No foundry.toml found in project directory"
    return path.read_text(encoding="utf-8")


async def _read_remappings(ctx: ToolContext) -> str:
    result = await ctx.runner.run(ctx.config.forge_bin, ["remappings"], ctx.project_path)
    if not result.success:
        return f"Error: {result.stderr or result.stdout}"
    return result.stdout or "No remappings configured"


def find_contracts(project_path: str) -> List[str]:
    """Project-relative paths of every ``.sol`` file under ``src/``, sorted."""
    root = Path(project_path)
    src = root / "src"
    if not src.is_dir():
        return []
    return sorted(path.relative_to(root).as_posix() for path in src.rglob("*.sol") if path.is_file())


async def _read_contracts(ctx: ToolContext) -> str:
    return json.dumps(find_contracts(ctx.project_path), indent=2)


RESOURCES: Dict[str, ResourceDefinition] = {
    resource.uri: resource
    for resource in (
        ResourceDefinition(
            uri="foundry://docs",
            name="foundry_docs",
            description="Official Foundry documentation (LLM edition), cached for an hour.",
            mime_type=TEXT,
            reader=_read_docs,
        ),
        ResourceDefinition(
            uri="foundry://docs/links",
            name="foundry_docs_links",
            description="Links to the official Foundry documentation pages.",
            mime_type=JSON,
            reader=_read_docs_links,
        ),
        ResourceDefinition(
            uri="foundry://config",
            name="foundry_config",
            description="The project's foundry.toml.",
            mime_type=TEXT,
            reader=_read_config,
        ),
        ResourceDefinition(
            uri="foundry://remappings",
            name="foundry_remappings",
            description="Import remappings reported by forge.",
            mime_type=TEXT,
            reader=_read_remappings,
        ),
        ResourceDefinition(
            uri="foundry://contracts",
            name="foundry_contracts",
            description="Solidity source files under src/.",
            mime_type=JSON,
            reader=_read_contracts,
        ),
    )
}

TEMPLATES: List[ResourceTemplate] = [
    ResourceTemplate("abi", "contract_abi", "ABI of a compiled contract.", JSON, "abi"),
    ResourceTemplate("bytecode", "contract_bytecode", "Creation bytecode of a compiled contract.", TEXT, "bytecode"),
    ResourceTemplate(
        "storage-layout", "contract_storage_layout", "Storage layout of a compiled contract.", JSON, "storageLayout"
    ),
    ResourceTemplate(
        "method-identifiers",
        "contract_method_identifiers",
        "Function selectors of a compiled contract.",
        JSON,
        "methodIdentifiers",
    ),
    ResourceTemplate(
        "gas-estimates", "contract_gas_estimates", "Gas estimates for contract functions.", JSON, "gasEstimates"
    ),
]


def list_resources() -> List[Dict[str, Any]]:
    return [
        {
            "uri": resource.uri,
            "name": resource.name,
            "description": resource.description,
            "mimeType": resource.mime_type,
        }
        for resource in RESOURCES.values()
    ]


def list_resource_templates() -> List[Dict[str, Any]]:
    return [
        {
            "uriTemplate": template.uri_template,
            "name": template.name,
            "description": template.description,
            "mimeType": template.mime_type,
        }
        for template in TEMPLATES
    ]


def _match_template(uri: str) -> Optional[tuple]:
    if not uri.startswith(SCHEME):
        return None
    path = uri[len(SCHEME):]
    for template in TEMPLATES:
        marker = template.prefix + "/"
        if path.startswith(marker) and len(path) > len(marker):
            return template, path[len(marker):]
    return None


async def _read_template(ctx: ToolContext, template: ResourceTemplate, contract: str) -> Dict[str, str]:
    if not is_valid_contract(contract):
        return {"mimeType": TEXT, "text": f"Invalid contract name: {contract}"}
    result = await ctx.runner.run(
        ctx.config.forge_bin, ["inspect", contract, template.inspect_field], ctx.project_path
    )
    if not result.success:
        return {"mimeType": TEXT, "text": f"Error: {result.stderr or result.stdout}"}
    return {"mimeType": template.mime_type, "text": result.stdout}


async def read_resource(uri: str, ctx: ToolContext) -> Dict[str, Any]:
    """
    Resolve ``uri`` and return an MCP ``resources/read`` result.

    Raises:
        ResourceNotFound: no resource or template matches ``uri``.
    """
    resource = RESOURCES.get(uri)
    if resource is not None:
        text = await resource.reader(ctx)
        return {"contents": [{"uri": uri, "mimeType": resource.mime_type, "text": text}]}

    matched = _match_template(uri)
    if matched is None:
        raise ResourceNotFound(uri)
    template, contract = matched
    content = await _read_template(ctx, template, contract)
    return {"contents": [{"uri": uri, **content}]}
