"""Prompt templates for common Foundry workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional


class PromptError(ValueError):
    """Unknown prompt or missing required argument."""


@dataclass(slots=True)
class PromptArgument:
    name: str
    description: str
    required: bool = True


@dataclass(slots=True)
class PromptDefinition:
    name: str
    description: str
    render: Callable[[Mapping[str, str]], str]
    arguments: List[PromptArgument] = field(default_factory=list)


def _deploy_contract(args: Mapping[str, str]) -> str:
    contract = args["contract_name"]
    network = args.get("network")
    target = f" to {network}" if network else ""
    network_line = f"Network: {network}" if network else "Network: not specified (use a local anvil node if one is running)"
    return f"""Help me deploy the {contract} contract{target}.

Steps:
1. Compile the project with forge build and stop on compilation errors.
2. For a live network, confirm the RPC URL, that the deployer holds enough ETH for gas,
   and that the private key is supplied through the environment rather than typed inline.
3. Produce the deployment command with forge create or forge script.
4. Add a verification step if the contract should be verified.

Contract: {contract}
{network_line}"""


def _debug_test(args: Mapping[str, str]) -> str:
    test = args["test_name"]
    error = args.get("error_message")
    error_line = f"Error message: {error}\n\n" if error else ""
    return f"""Help me debug the failing test {test}.

{error_line}Steps:
1. Re-run it with traces: forge test -vvvv --match-test {test}
2. Find the failing assertion or revert in the trace.
3. Review the test setUp and any mocks it relies on.
4. Propose a fix.
5. Replay relevant transactions with cast run if the failure involves on-chain state.

Test: {test}"""


def _write_test(args: Mapping[str, str]) -> str:
    contract = args["contract_name"]
    functions = args.get("functions")
    scope = f"Focus on: {functions}" if functions else "Cover every public and external function."
    return f"""Help me write tests for the {contract} contract.

{scope}

Steps:
1. Inspect the ABI to learn the contract's interface.
2. Create a test file under test/ following Foundry conventions.
3. Include a setUp that deploys the contract, unit tests per function, edge cases
   (zero and max values, access control), fuzz tests where inputs vary, and event checks.
4. Use labelled assertions and keep each test arrange/act/assert.

Contract: {contract}"""


def _explain_storage(args: Mapping[str, str]) -> str:
    contract = args["contract_name"]
    return f"""Explain the storage layout of the {contract} contract.

Steps:
1. Read the layout with forge inspect {contract} storageLayout.
2. Walk through each slot and the variables stored in it.
3. Point out packed variables.
4. Flag collision risks if the contract is upgradeable.
5. Count the slots used and suggest ways to use fewer.

Contract: {contract}"""


def _gas_optimization(args: Mapping[str, str]) -> str:
    contract = args["contract_name"]
    return f"""Review the {contract} contract for gas savings.

Steps:
1. Read the estimates with forge inspect {contract} gasEstimates.
2. Run forge test --gas-report and find the most expensive functions.
3. Look for storage reads that can be cached, loops that can be tightened,
   variables that can be packed, and arithmetic that can be unchecked safely.
4. Suggest concrete code changes with the expected saving.
5. Note where a saving costs readability.

Contract: {contract}"""


def _security_review(args: Mapping[str, str]) -> str:
    contract = args["contract_name"]
    return f"""Perform a security review of the {contract} contract.

Check for:
1. Reentrancy
2. Arithmetic overflow on compilers older than 0.8
3. Missing or incorrect access control
4. Front-running exposure
5. Oracle manipulation
6. Flash-loan attack paths
7. Denial of service
8. Centralization of privileged roles
9. Upgrade safety
10. Missing events on critical state changes

Use forge inspect to examine the contract and invariant tests to check safety properties.
Confirm the checks-effects-interactions pattern is followed.

Contract: {contract}"""


def _fork_test(args: Mapping[str, str]) -> str:
    address = args["contract_address"]
    network = args.get("network") or "mainnet"
    block = args.get("block")
    block_line = f"Fork block: {block}" if block else "Fork block: latest"
    block_flag = f" --fork-block-number {block}" if block else ""
    return f"""Help me test against a fork of {network}.

Contract address: {address}
{block_line}

Steps:
1. Start a forked node with anvil_start (anvil --fork-url <RPC_URL>{block_flag}).
2. Generate an interface for the contract with cast interface.
3. Write a test that selects the fork with vm.createSelectFork(), calls the deployed
   contract and uses vm.prank() to act as relevant accounts.
4. Run the test against the fork.
5. Stop the anvil node afterwards.

Target: {address}"""


def _create_script(args: Mapping[str, str]) -> str:
    name = args["name"]
    purpose = args["purpose"]
    return f"""Help me create a Foundry script named {name}.

Purpose: {purpose}

Steps:
1. Add the script under script/, inheriting from Script.
2. Wrap state-changing calls in vm.startBroadcast() / vm.stopBroadcast().
3. Use a run() entry point and log what the script does.
4. Show how to simulate it with forge script before broadcasting.

Script: {name}"""


def _lookup_docs(args: Mapping[str, str]) -> str:
    topic = args["topic"]
    return f"""Help me understand: {topic}

Steps:
1. Read the current CLI help first: forge_help, cast_help or chisel_help with the
   subcommand, or anvil_help.
2. Use the foundry://docs resource when more context is needed.
3. Explain what it does, common use cases, example commands and the important flags.
4. Link the official docs at https://getfoundry.sh.

Topic: {topic}

Foundry changes quickly, so prefer --help output over remembered behaviour."""


PROMPTS: Dict[str, PromptDefinition] = {
    prompt.name: prompt
    for prompt in (
        PromptDefinition(
            name="deploy_contract",
            description="Guide for deploying a Solidity contract.",
            render=_deploy_contract,
            arguments=[
                PromptArgument("contract_name", "Name of the contract to deploy"),
                PromptArgument("network", "Target network (mainnet, sepolia, local)", required=False),
            ],
        ),
        PromptDefinition(
            name="debug_test",
            description="Help debug a failing Solidity test.",
            render=_debug_test,
            arguments=[
                PromptArgument("test_name", "Name of the failing test"),
                PromptArgument("error_message", "Error message, if available", required=False),
            ],
        ),
        PromptDefinition(
            name="write_test",
            description="Generate tests for a Solidity contract.",
            render=_write_test,
            arguments=[
                PromptArgument("contract_name", "Name of the contract to test"),
                PromptArgument("functions", "Comma-separated functions to focus on", required=False),
            ],
        ),
        PromptDefinition(
            name="explain_storage",
            description="Explain the storage layout of a contract.",
            render=_explain_storage,
            arguments=[PromptArgument("contract_name", "Name of the contract to analyze")],
        ),
        PromptDefinition(
            name="gas_optimization",
            description="Review a contract for gas optimization opportunities.",
            render=_gas_optimization,
            arguments=[PromptArgument("contract_name", "Name of the contract to optimize")],
        ),
        PromptDefinition(
            name="security_review",
            description="Perform a security review of a contract.",
            render=_security_review,
            arguments=[PromptArgument("contract_name", "Name of the contract to review")],
        ),
        PromptDefinition(
            name="fork_test",
            description="Test a contract against forked chain state.",
            render=_fork_test,
            arguments=[
                PromptArgument("contract_address", "Address of the contract to test"),
                PromptArgument("network", "Network to fork (default: mainnet)", required=False),
                PromptArgument("block", "Block number to fork at", required=False),
            ],
        ),
        PromptDefinition(
            name="create_script",
            description="Create a Foundry script for deployment or automation.",
            render=_create_script,
            arguments=[
                PromptArgument("name", "Name of the script"),
                PromptArgument("purpose", "What the script should do"),
            ],
        ),
        PromptDefinition(
            name="lookup_docs",
            description="Look up documentation for a Foundry command or feature.",
            render=_lookup_docs,
            arguments=[PromptArgument("topic", "Command or feature, e.g. 'forge test' or 'cheatcodes'")],
        ),
    )
}


def list_prompts() -> List[Dict[str, Any]]:
    return [
        {
            "name": prompt.name,
            "description": prompt.description,
            "arguments": [
                {"name": arg.name, "description": arg.description, "required": arg.required}
                for arg in prompt.arguments
            ],
        }
        for prompt in PROMPTS.values()
    ]


def get_prompt(name: str, arguments: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Render prompt ``name`` as an MCP ``prompts/get`` result.

    Raises:
        PromptError: unknown prompt or a required argument is missing.
    """
    prompt = PROMPTS.get(name)
    if prompt is None:
        raise PromptError(f"Unknown prompt: {name}")

    supplied = {key: str(value) for key, value in (arguments or {}).items() if value is not None}
    missing = [arg.name for arg in prompt.arguments if arg.required and not supplied.get(arg.name)]
    if missing:
        raise PromptError(f"Missing required argument(s): {', '.join(missing)}")

    return {
        "description": prompt.description,
        "messages": [{"role": "user", "content": {"type": "text", "text": prompt.render(supplied)}}],
    }
