import json

import pytest

from foundry_mcp.docs import DocsFetchError
from foundry_mcp.process import CommandResult
from foundry_mcp.resources import (
    ResourceNotFound,
    find_contracts,
    list_resource_templates,
    list_resources,
    read_resource,
)


class FailingDocs:
    async def get(self):
        raise DocsFetchError("Failed to fetch docs: 503")

    async def aclose(self):
        return None


def test_list_resources_shape():
    uris = {resource["uri"] for resource in list_resources()}
    assert {"foundry://docs", "foundry://config", "foundry://contracts"} <= uris
    assert all("mimeType" in resource for resource in list_resources())


def test_list_templates():
    templates = {template["uriTemplate"] for template in list_resource_templates()}
    assert "foundry://abi/{contract}" in templates
    assert "foundry://storage-layout/{contract}" in templates


def test_find_contracts(tmp_path):
    (tmp_path / "src" / "tokens").mkdir(parents=True)
    (tmp_path / "src" / "Vault.sol").write_text("contract Vault {}", encoding="utf-8")
    (tmp_path / "src" / "tokens" / "Token.sol").write_text("contract Token {}", encoding="utf-8")
    (tmp_path / "src" / "notes.md").write_text("ignore me", encoding="utf-8")
    assert find_contracts(str(tmp_path)) == ["src/Vault.sol", "src/tokens/Token.sol"]


def test_find_contracts_without_src(tmp_path):
    assert find_contracts(str(tmp_path)) == []


@pytest.mark.asyncio
async def test_read_config(ctx, tmp_path):
    result = await read_resource("foundry://config", ctx)
    assert result["contents"][0]["text"] == "No foundry.toml found in project directory"
    (tmp_path / "foundry.toml").write_text("[profile.default]\nsrc = 'src'\n", encoding="utf-8")
    result = await read_resource("foundry://config", ctx)
    assert result["contents"][0] == {
        "uri": "foundry://config",
        "mimeType": "text/plain",
        "text": "[profile.default]\nsrc = 'src'\n",
    }


@pytest.mark.asyncio
async def test_read_docs_fallback(ctx):
    ctx.docs = FailingDocs()
    result = await read_resource("foundry://docs", ctx)
    text = result["contents"][0]["text"]
    assert text.startswith("Failed to fetch documentation")
    assert ctx.config.docs_url in text


@pytest.mark.asyncio
async def test_read_docs_links(ctx):
    result = await read_resource("foundry://docs/links", ctx)
    links = json.loads(result["contents"][0]["text"])
    assert links["llm_full"] == ctx.config.docs_url
    assert links["sections"]["reference"]["cheatcodes"].endswith("/cheatcodes")


@pytest.mark.asyncio
async def test_read_remappings(ctx, runner):
    runner.queue(CommandResult.from_exit(0, ""))
    result = await read_resource("foundry://remappings", ctx)
    assert result["contents"][0]["text"] == "No remappings configured"
    assert runner.last_args == ["remappings"]


@pytest.mark.asyncio
async def test_read_template_runs_inspect(ctx, runner):
    runner.queue(CommandResult.from_exit(0, '[{"type":"function"}]'))
    result = await read_resource("foundry://abi/Token", ctx)
    assert result["contents"][0]["mimeType"] == "application/json"
    assert runner.last_args == ["inspect", "Token", "abi"]
    assert runner.calls[-1]["cwd"] == ctx.project_path


@pytest.mark.asyncio
async def test_read_template_rejects_bad_contract(ctx, runner):
    result = await read_resource("foundry://bytecode/bad name", ctx)
    assert result["contents"][0]["text"] == "Invalid contract name: bad name"
    assert runner.calls == []


@pytest.mark.asyncio
async def test_unknown_resource(ctx):
    with pytest.raises(ResourceNotFound):
        await read_resource("foundry://nothing", ctx)
    with pytest.raises(ResourceNotFound):
        await read_resource("foundry://abi/", ctx)
