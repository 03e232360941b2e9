import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, Callable, Dict, List, Literal, Optional

import mcp.server.stdio
import mcp.types as types
import pydantic
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.models import InitializationOptions
from pydantic import Field, StrictBool, StrictStr

from tealium_mcp.debug import debug_data_layer
from tealium_mcp.document import generate_documentation
from tealium_mcp.errors import ToolArgumentError
from tealium_mcp.generate import generate_code
from tealium_mcp.models import WireModel
from tealium_mcp.parse_spec import parse_tracking_spec
from tealium_mcp.reporting import format_debug_result, format_parsed_spec, format_validation_result
from tealium_mcp.resources import list_resources, read_resource
from tealium_mcp.schemas import DEFAULT_SCHEMA_URI
from tealium_mcp.validate import validate_data_layer

logger = logging.getLogger(__name__)

SERVER_NAME = "tealium-mcp-server"
SERVER_VERSION = "1.0.0"

TOOLS: List[types.Tool] = [
    types.Tool(
        name="validate_data_layer",
        description=(
            "Validates a Tealium data layer object against schemas and best practices. "
            "Returns errors, warnings, and suggestions for improvement."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "dataLayer": {"type": "object", "description": "The data layer JSON object to validate"},
                "schemaUri": {
                    "type": "string",
                    "description": (
                        "Schema to validate against (tealium://schema/standard, "
                        "tealium://schema/ecommerce, or tealium://schema/hotels)"
                    ),
                    "default": DEFAULT_SCHEMA_URI,
                },
                "strictMode": {
                    "type": "boolean",
                    "description": "When true, treats warnings as errors",
                    "default": False,
                },
            },
            "required": ["dataLayer"],
        },
    ),
    types.Tool(
        name="generate_documentation",
        description=(
            "Generates documentation from a data layer structure or tracking specification. "
            "Outputs Markdown or JSON Schema format."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "dataLayer": {"type": "object", "description": "A data layer object to document"},
                "spec": {
                    "type": "object",
                    "description": "A tracking specification object with variables and events",
                },
                "format": {
                    "type": "string",
                    "enum": ["markdown", "json-schema"],
                    "description": "Output format",
                    "default": "markdown",
                },
            },
        },
    ),
    types.Tool(
        name="debug_data_layer",
        description=(
            "Analyzes a data layer for common issues, missing variables, type mismatches, "
            "and provides recommendations."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "dataLayer": {"type": "object", "description": "The data layer JSON to debug"},
                "checkPoints": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": 'Specific areas to focus on (e.g., "ecommerce", "loyalty", "search")',
                },
            },
            "required": ["dataLayer"],
        },
    ),
    types.Tool(
        name="generate_code",
        description=(
            "Generates TypeScript or JavaScript code from a tracking specification or data layer. "
            "Includes type definitions, helper functions, and event tracking code."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "spec": {"type": "object", "description": "Tracking specification with variables and events"},
                "dataLayer": {"type": "object", "description": "Data layer object to generate types from"},
                "language": {
                    "type": "string",
                    "enum": ["typescript", "javascript"],
                    "description": "Target language",
                    "default": "typescript",
                },
                "includeHelpers": {
                    "type": "boolean",
                    "description": "Include helper functions like trackEvent()",
                    "default": True,
                },
            },
        },
    ),
    types.Tool(
        name="parse_tracking_spec",
        description=(
            "Parses tracking specifications from CSV or JSON format (e.g., exported from "
            "Google Sheets or Excel). Normalizes the data into a structured format."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "content": {"type": "string", "description": "CSV or JSON content to parse"},
                "format": {
                    "type": "string",
                    "enum": ["csv", "json", "auto"],
                    "description": "Input format (auto-detected if not specified)",
                    "default": "auto",
                },
                "hasHeader": {
                    "type": "boolean",
                    "description": "For CSV: whether the first row is a header",
                    "default": True,
                },
            },
            "required": ["content"],
        },
    ),
]


# ------------------------------------------------------------------
# Tool arguments
# ------------------------------------------------------------------

class ValidateArgs(WireModel):
    data_layer: Any = None
    schema_uri: StrictStr = DEFAULT_SCHEMA_URI
    strict_mode: StrictBool = False


class DocumentationArgs(WireModel):
    data_layer: Optional[Dict[str, Any]] = None
    spec: Optional[Dict[str, Any]] = None
    format: Literal["markdown", "json-schema"] = "markdown"


class DebugArgs(WireModel):
    data_layer: Any = None
    check_points: List[StrictStr] = Field(default_factory=list)


class GenerateCodeArgs(WireModel):
    spec: Optional[Dict[str, Any]] = None
    data_layer: Optional[Dict[str, Any]] = None
    language: Literal["typescript", "javascript"] = "typescript"
    include_helpers: StrictBool = True


class ParseSpecArgs(WireModel):
    content: StrictStr
    format: Literal["csv", "json", "auto"] = "auto"
    has_header: StrictBool = True


def parse_arguments(tool_name: str, model, arguments: Optional[Dict[str, Any]]):
    try:
        return model.model_validate(arguments or {})
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        argument = str(first["loc"][0]) if first["loc"] else "arguments"
        if first["type"] == "missing":
            message = f"{argument} is required"
        else:
            message = f"Invalid argument {argument}: {first['msg']}"
        raise ToolArgumentError(tool_name, argument, message) from e


# ------------------------------------------------------------------
# Tool handlers
# ------------------------------------------------------------------

def _validate(arguments: Dict[str, Any]) -> str:
    args = parse_arguments("validate_data_layer", ValidateArgs, arguments)
    result = validate_data_layer(args.data_layer, args.schema_uri, args.strict_mode)
    return format_validation_result(result)


def _document(arguments: Dict[str, Any]) -> str:
    args = parse_arguments("generate_documentation", DocumentationArgs, arguments)
    return generate_documentation(data_layer=args.data_layer, spec=args.spec, format=args.format)


def _debug(arguments: Dict[str, Any]) -> str:
    args = parse_arguments("debug_data_layer", DebugArgs, arguments)
    return format_debug_result(debug_data_layer(args.data_layer, args.check_points))


def _generate(arguments: Dict[str, Any]) -> str:
    args = parse_arguments("generate_code", GenerateCodeArgs, arguments)
    code = generate_code(
        spec=args.spec,
        data_layer=args.data_layer,
        language=args.language,
        include_helpers=args.include_helpers,
    )
    return f"```{code.language}\n{code.code}\n```"


def _parse_spec(arguments: Dict[str, Any]) -> str:
    args = parse_arguments("parse_tracking_spec", ParseSpecArgs, arguments)
    spec = parse_tracking_spec(args.content, args.format, args.has_header)
    spec_json = json.dumps(spec.to_wire(), indent=2, ensure_ascii=False)
    return f"{format_parsed_spec(spec)}\n\n```json\n{spec_json}\n```"


HANDLERS: Dict[str, Callable[[Dict[str, Any]], str]] = {
    "validate_data_layer": _validate,
    "generate_documentation": _document,
    "debug_data_layer": _debug,
    "generate_code": _generate,
    "parse_tracking_spec": _parse_spec,
}


def call_tool(name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
    """Run one tool and return its rendered text; errors propagate to the caller."""
    handler = HANDLERS.get(name)
    if handler is None:
        raise ToolArgumentError(name, "name", f"Unknown tool: {name}")
    return handler(arguments if isinstance(arguments, dict) else {})


# ------------------------------------------------------------------
# MCP wiring
# ------------------------------------------------------------------

def create_server(name: str = SERVER_NAME) -> Server:
    server = Server(name)

    @server.list_tools()
    async def handle_list_tools() -> List[types.Tool]:
        return TOOLS

    @server.call_tool()
    async def handle_call_tool(tool_name: str, arguments: Dict[str, Any]) -> List[types.TextContent]:
        try:
            text = call_tool(tool_name, arguments)
        except Exception as e:
            logger.warning("Tool %s failed: %s", tool_name, e)
            raise
        return [types.TextContent(type="text", text=text)]

    @server.list_resources()
    async def handle_list_resources() -> List[types.Resource]:
        return [
            types.Resource(
                uri=r["uri"],
                name=r["name"],
                description=r["description"],
                mimeType=r["mime_type"],
            )
            for r in list_resources()
        ]

    @server.read_resource()
    async def handle_read_resource(uri) -> List[ReadResourceContents]:
        text, mime_type = read_resource(str(uri))
        return [ReadResourceContents(content=text, mime_type=mime_type)]

    return server


async def main(server_name: str = SERVER_NAME) -> None:
    server = create_server(server_name)
    logger.info("Starting %s over stdio", server_name)
    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name=server_name,
                server_version=SERVER_VERSION,
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


def run() -> None:
    parser = argparse.ArgumentParser(description="Tealium data layer MCP server (stdio)")
    parser.add_argument(
        "--server-name",
        default=os.getenv("TEALIUM_MCP_SERVER_NAME", SERVER_NAME),
        help="MCP server name.",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("TEALIUM_MCP_LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
    )
    args = parser.parse_args()

    # stdout carries the protocol
    logging.basicConfig(level=args.log_level, stream=sys.stderr)
    asyncio.run(main(args.server_name))


if __name__ == "__main__":
    run()
