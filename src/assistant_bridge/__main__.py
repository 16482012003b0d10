"""CLI entry point for assistant-bridge.

This module provides the command-line interface. It can be invoked as
`assistant-bridge` (via the script entry point) or `python -m assistant_bridge`.

Commands:
    serve     Start the HTTP API (default)
    register  Create the remote agent for a provider and print its id
    schema    Print the agent definition that `register` would send
    chat      Talk to the agent on stdin/stdout until "exit"
"""

import argparse
import asyncio
import json
import logging
import sys

import uvicorn

from assistant_bridge import __version__, create_app
from assistant_bridge.capabilities import derive_registry, load_provider_class
from assistant_bridge.config import BridgeSettings
from assistant_bridge.errors import AgentError
from assistant_bridge.remote import AgentIdentity, AssistantsClient
from assistant_bridge.services.registration import build_agent_definition, publish
from assistant_bridge.sessions import AgentSession

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assistant-bridge",
        description="Expose local capabilities to a remote assistants service",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"assistant-bridge {__version__}",
    )
    parser.add_argument(
        "--provider",
        type=str,
        default=None,
        help="Capability provider as module:ClassName (can be set via BRIDGE_PROVIDER)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via BRIDGE_LOG_LEVEL)",
    )

    commands = parser.add_subparsers(dest="command")

    serve = commands.add_parser("serve", help="Start the HTTP API")
    serve.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via BRIDGE_HOST)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8000, can be set via BRIDGE_PORT)",
    )

    register = commands.add_parser(
        "register",
        help="Create the remote agent (not idempotent: each call creates a new agent)",
    )
    register.add_argument(
        "--model",
        type=str,
        default=None,
        help="Remote model for the agent (can be set via BRIDGE_MODEL)",
    )

    schema = commands.add_parser("schema", help="Print the agent definition as JSON")
    schema.add_argument("--model", type=str, default=None, help="Remote model for the agent")

    chat = commands.add_parser("chat", help="Chat with the agent on stdin/stdout")
    chat.add_argument(
        "--agent-id",
        type=str,
        default=None,
        help="Remote agent id (can be set via BRIDGE_AGENT_ID)",
    )
    chat.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds a single prompt may take (can be set via BRIDGE_PROMPT_TIMEOUT_S)",
    )
    chat.add_argument(
        "--debug",
        action="store_true",
        help="Print every capability call with its arguments",
    )

    return parser


def build_settings(args: argparse.Namespace) -> BridgeSettings:
    """Build settings; CLI args override environment variables."""
    overrides = {
        "provider": args.provider,
        "log_level": args.log_level,
        "host": getattr(args, "host", None),
        "port": getattr(args, "port", None),
        "model": getattr(args, "model", None),
        "agent_id": getattr(args, "agent_id", None),
        "prompt_timeout_s": getattr(args, "timeout", None),
    }
    settings_kwargs = {k: v for k, v in overrides.items() if v is not None}
    if getattr(args, "debug", False):
        settings_kwargs["debug"] = True
    return BridgeSettings(**settings_kwargs)


def _client(settings: BridgeSettings) -> AssistantsClient:
    return AssistantsClient(
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout=settings.request_timeout_s,
    )


async def register_agent(settings: BridgeSettings) -> str:
    """Register the configured provider and return the new agent id."""
    registry = derive_registry(load_provider_class(settings.provider))
    client = _client(settings)
    try:
        agent = await publish(client, registry, settings.model)
    finally:
        await client.close()
    return agent.remote_agent_id


async def chat_loop(settings: BridgeSettings) -> None:
    """Read prompts from stdin and print the agent's replies until "exit"."""
    if not settings.agent_id:
        raise SystemExit("No agent id configured; use --agent-id or BRIDGE_AGENT_ID")

    provider = load_provider_class(settings.provider)()
    client = _client(settings)
    try:
        session = await AgentSession.create(
            client=client,
            provider=provider,
            agent=AgentIdentity(settings.agent_id),
            timeout=settings.prompt_timeout_s,
            poll_interval=settings.poll_interval_s,
            debug=settings.debug,
        )
        async with session:
            while True:
                line = await asyncio.to_thread(sys.stdin.readline)
                if not line or line.strip().lower() == "exit":
                    break
                if not line.strip():
                    continue
                try:
                    reply = await session.send_prompt(line.strip())
                except AgentError as e:
                    print(f"Error: {e}", file=sys.stderr)
                    continue
                print(reply if reply is not None else "[No assistant reply]")
    finally:
        await client.close()


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the assistant-bridge CLI."""
    args = build_parser().parse_args(argv)
    settings = build_settings(args)
    command = args.command or "serve"

    if command == "serve":
        app = create_app(settings=settings)
        uvicorn.run(
            app,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )
        return 0

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if command == "schema":
        registry = derive_registry(load_provider_class(settings.provider))
        print(json.dumps(build_agent_definition(registry, settings.model), indent=2))
        return 0

    if command == "register":
        try:
            agent_id = asyncio.run(register_agent(settings))
        except AgentError as e:
            logger.error(f"{e}")
            return 1
        print(agent_id)
        logger.warning(
            "Registration creates a new remote agent every time; delete replaced agents manually"
        )
        return 0

    try:
        asyncio.run(chat_loop(settings))
    except (AgentError, ImportError, TypeError, ValueError) as e:
        logger.error(f"{e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
