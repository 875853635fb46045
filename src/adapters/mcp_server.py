"""MCP (Model Context Protocol) stdio server exposing act as tools.

Why in adapters:
- The MCP SDK and the text payloads are transport details; the tools only
  delegate to `core.services`.
- `handle_tool_call` is a plain synchronous function so the dispatch and
  the error boundary can be tested without a running server.

Every failure inside a tool comes back as a text payload; nothing raised by a
tool ever reaches the SDK, so one bad call cannot take the server down.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

import mcp.types as types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from core.config import AppSettings
from core.domain.models import CheckStatus, DoctorCheck
from core.exceptions import ToolUnavailableError
from core.interfaces.act_cli import ActCommandRunner
from core.services.doctor import collect_doctor_checks
from core.services.workflows import (
    WORKFLOWS_RELATIVE_DIR,
    RunWorkflowRequest,
    ValidateWorkflowRequest,
    build_act_args,
    event_file,
    parse_workflow_list,
    resolve_workflow_path,
)


logger = logging.getLogger(__name__)

SERVER_NAME = "act-testing-mcp"

_NO_ARGS_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}, "required": []}

_CHECK_ICONS: dict[CheckStatus, str] = {
    CheckStatus.OK: "✅",
    CheckStatus.ERROR: "❌",
    CheckStatus.INFO: "ℹ️ ",
}


def tool_definitions() -> list[types.Tool]:
    return [
        types.Tool(
            name="list_workflows",
            description="List all available GitHub Actions workflows in the repository",
            inputSchema=_NO_ARGS_SCHEMA,
        ),
        types.Tool(
            name="run_workflow",
            description="Run a GitHub Actions workflow locally using act",
            inputSchema=RunWorkflowRequest.model_json_schema(by_alias=True),
        ),
        types.Tool(
            name="validate_workflow",
            description="Validate a workflow file syntax and structure",
            inputSchema=ValidateWorkflowRequest.model_json_schema(by_alias=True),
        ),
        types.Tool(
            name="act_doctor",
            description="Check act configuration and Docker setup",
            inputSchema=_NO_ARGS_SCHEMA,
        ),
    ]


def format_doctor_check(check: DoctorCheck) -> str:
    return f"{_CHECK_ICONS[check.status]} {check.message}"


class WorkflowToolbox:
    """Implementations of the MCP tools. Each returns the text payload."""

    def __init__(self, runner: ActCommandRunner, settings: AppSettings) -> None:
        self.runner = runner
        self.settings = settings

    def _require_act(self) -> None:
        if not self.runner.is_available():
            raise ToolUnavailableError(self.runner.binary)

    def list_workflows(self, arguments: Mapping[str, Any]) -> str:
        self._require_act()
        result = self.runner.run(["--list"])
        if not result.success:
            return f"Error listing workflows: {result.stderr}"

        jobs = parse_workflow_list(result.stdout)
        blocks = [
            f"📋 **{job.workflow_name}** ({job.workflow_file or 'unknown file'})\n"
            f"   Job: {job.job_name} ({job.job_id})\n"
            f"   Events: {', '.join(job.events)}\n"
            for job in jobs
        ]
        return f"Found {len(jobs)} workflows:\n\n" + "\n".join(blocks)

    def run_workflow(self, arguments: Mapping[str, Any]) -> str:
        request = RunWorkflowRequest.model_validate(dict(arguments))
        self._require_act()

        with event_file(self.settings.event_file_path(), request.event_data) as event_path:
            result = self.runner.run(build_act_args(request, event_path=event_path))

        if result.success:
            mode = "(dry-run) " if request.dry_run else ""
            return f"✅ Workflow execution {mode}completed successfully!\n\n{result.stdout}"
        return (
            "❌ Workflow execution failed:\n\n"
            f"**Error:**\n{result.stderr}\n\n"
            f"**Output:**\n{result.stdout}"
        )

    def validate_workflow(self, arguments: Mapping[str, Any]) -> str:
        request = ValidateWorkflowRequest.model_validate(dict(arguments))
        if resolve_workflow_path(self.settings.workflows_dir(), request.workflow) is None:
            return f"❌ Workflow file not found: {request.workflow}"

        self._require_act()
        result = self.runner.run(["--list", "-W", f"{WORKFLOWS_RELATIVE_DIR}/{request.workflow}"])
        if result.success:
            return f"✅ Workflow {request.workflow} is valid!\n\n{result.stdout}"
        return f"❌ Workflow {request.workflow} has issues:\n\n{result.stderr}"

    def act_doctor(self, arguments: Mapping[str, Any]) -> str:
        checks = collect_doctor_checks(self.runner, self.settings)
        lines = "\n".join(format_doctor_check(c) for c in checks)
        return (
            f"🔍 **Act Testing Environment Check**\n\n{lines}\n\n"
            f"**Project Root:** {self.settings.project_root}\n"
            f"**Act Binary:** {self.runner.binary}"
        )

    def handlers(self) -> dict[str, Callable[[Mapping[str, Any]], str]]:
        return {
            "list_workflows": self.list_workflows,
            "run_workflow": self.run_workflow,
            "validate_workflow": self.validate_workflow,
            "act_doctor": self.act_doctor,
        }


def handle_tool_call(toolbox: WorkflowToolbox, name: str, arguments: Mapping[str, Any] | None) -> str:
    """Dispatch one tool call. Never raises."""

    try:
        handler = toolbox.handlers().get(name)
        if handler is None:
            raise ValueError(f"Unknown tool: {name}")
        return handler(arguments or {})
    except Exception as exc:
        logger.exception("tool %s failed", name)
        return f"Error executing {name}: {exc}"


def build_server(toolbox: WorkflowToolbox) -> Server:
    server: Server = Server(SERVER_NAME)

    @server.list_tools()
    async def _list_tools() -> list[types.Tool]:
        return tool_definitions()

    @server.call_tool()
    async def _call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        text = handle_tool_call(toolbox, name, arguments)
        return [types.TextContent(type="text", text=text)]

    return server


async def serve(toolbox: WorkflowToolbox) -> None:
    """Run the MCP server over stdio until the client disconnects."""

    server = build_server(toolbox)
    logger.info("%s serving over stdio (project root: %s)", SERVER_NAME, toolbox.settings.project_root)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
