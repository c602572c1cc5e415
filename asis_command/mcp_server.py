#!/usr/bin/env python3
"""
Asis Command MCP Server.

Exposes two tools: `asis_preview(command="...")` shows what a Spanish HR
command would do, and `asis_execute(command="...", executed_by="...")`
runs it once the preview allows execution.

Port: 8891 (configurable via ASIS_COMMAND_MCP_PORT)
Transport: SSE
"""

import logging
import os
import sys

from fastmcp import FastMCP

from asis_command import AsisCommand, BackendError, format_preview

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("asis-command.mcp")

# Configuration
MCP_ENABLED = os.getenv("ASIS_COMMAND_MCP_ENABLED", "false").lower() == "true"
MCP_PORT = int(os.getenv("ASIS_COMMAND_MCP_PORT", "8891"))
MCP_HOST = os.getenv("ASIS_COMMAND_MCP_HOST", "0.0.0.0")

# Create FastMCP server
mcp = FastMCP(name="asis-command")

# Registers all action handlers
asis = AsisCommand()


@mcp.tool()
async def asis_preview(command: str) -> str:
    """
    Show what a Spanish attendance command would do, without executing it.

    Args:
        command: Free-form Spanish command text.

    Examples:
        - "vacaciones para 18866264-1 desde el lunes por 5 días"
        - "licencia para 18.866.264-1 del 19 al 23 de enero"
        - "llegada tardía 18866264-1 hoy a las 9:30 motivo: tráfico"

    Returns:
        The resolved action, person, warnings and errors.
    """
    logger.info(f"Tool called: asis_preview(command='{command[:80]}')")

    try:
        preview = await asis.resolve(command)
    except BackendError as e:
        logger.warning(f"Directory unavailable: {e}")
        preview = asis.preview(command, person=None, directory_unavailable=True)

    return format_preview(preview)


@mcp.tool()
async def asis_execute(command: str, executed_by: str) -> str:
    """
    Execute a Spanish attendance command and record it in the audit log.

    Args:
        command: Free-form Spanish command text.
        executed_by: Operator recorded as the author of the action.

    Returns:
        Result of the action, or the reasons it could not run.
    """
    logger.info(f"Tool called: asis_execute(command='{command[:80]}', executed_by='{executed_by}')")

    result = await asis.process(command, executed_by=executed_by)

    if not result.success and result.suggestions:
        output = result.output + "\n\n**Pendiente:**\n"
        for suggestion in result.suggestions:
            output += f"- {suggestion}\n"
        return output

    return result.output


def main():
    """Main entry point."""
    if not MCP_ENABLED:
        logger.warning("=" * 60)
        logger.warning("Asis Command MCP Server is DISABLED")
        logger.warning("To enable: export ASIS_COMMAND_MCP_ENABLED=true")
        logger.warning("=" * 60)
        sys.exit(0)

    logger.info("=" * 60)
    logger.info("Starting FastMCP Asis Command Server")
    logger.info(f"Host: {MCP_HOST}")
    logger.info(f"Port: {MCP_PORT}")
    logger.info("Tools: asis_preview, asis_execute")
    logger.info("=" * 60)

    mcp.run(transport="sse", host=MCP_HOST, port=MCP_PORT)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
