"""CLI entry point for the status client."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import ANSI, HTML

from mcping.client import StatusClient
from mcping.config import AppConfig, ServerConfig, load_config
from mcping.errors import ConnectionError as PingConnectionError
from mcping.errors import PingError
from mcping.formatting import format_description, strip_formatting
from mcping.status import ServerStatus

log = logging.getLogger(__name__)

_SAMPLE_LIMIT = 10


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mcping",
        description="Query a Minecraft server's status (server list ping)",
    )
    parser.add_argument(
        "server",
        nargs="?",
        help="Server name (from config) or host:port (e.g., mc.example.com:25565)",
    )
    parser.add_argument(
        "--protocol-version",
        type=int,
        default=None,
        help="Protocol version sent in the handshake (default: from config, 498)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Socket timeout in seconds (default: from config, 10)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print the raw status document as JSON",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="Strip formatting codes instead of converting to ANSI colors",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Log protocol details to stderr",
    )
    return parser


def select_server(config: AppConfig) -> tuple[str, ServerConfig]:
    """Prompt the user to select from configured servers.

    Returns (key, ServerConfig).
    """
    servers = list(config.servers.items())
    if not servers:
        print(
            "No server given and none configured in ~/.config/mcping/config.toml",
            file=sys.stderr,
        )
        sys.exit(1)

    print("Available servers:")
    for i, (_key, srv) in enumerate(servers, 1):
        print(f"  {i}. {srv.name} ({srv.host}:{srv.port})")

    while True:
        try:
            choice = input(f"\nSelect server [1-{len(servers)}]: ").strip()
            idx = int(choice) - 1
            if 0 <= idx < len(servers):
                return servers[idx]
        except ValueError:
            pass
        except EOFError:
            sys.exit(1)
        print(f"Please enter a number between 1 and {len(servers)}")


def split_host_port(value: str) -> tuple[str, int | None]:
    """Split "host:port" or "[ipv6]:port" into (host, port).

    The port is None when absent or not a number. A bare IPv6 address
    (more than one colon, no brackets) is returned whole.
    """
    if value.startswith("["):
        addr, sep, rest = value[1:].partition("]")
        if sep:
            if not rest:
                return addr, None
            if rest.startswith(":"):
                try:
                    return addr, int(rest[1:])
                except ValueError:
                    pass
        return value, None

    if value.count(":") == 1:
        host, port_str = value.split(":")
        try:
            return host, int(port_str)
        except ValueError:
            pass
    return value, None


def resolve_server(
    server_arg: str | None, config: AppConfig
) -> tuple[str, ServerConfig]:
    """Resolve the target server from CLI arg or interactive selection.

    Returns (display_name, ServerConfig).
    """
    if server_arg is not None:
        if server_arg in config.servers:
            return server_arg, config.servers[server_arg]

        host, port = split_host_port(server_arg)
        if port is not None:
            return server_arg, ServerConfig(name=server_arg, host=host, port=port)
        return server_arg, ServerConfig(name=server_arg, host=host)

    if config.default_server and config.default_server in config.servers:
        key = config.default_server
        return key, config.servers[key]

    return select_server(config)


def render_status(status: ServerStatus, *, color: bool = True) -> list[str]:
    """Render the status summary as indented lines, one field per line."""
    version = strip_formatting(status.version_name) or "unknown"
    if status.protocol is not None:
        version += f" (protocol {status.protocol})"

    players = f"{status.players_online}/{status.players_max}"
    if status.player_sample:
        names = ", ".join(status.player_sample[:_SAMPLE_LIMIT])
        if len(status.player_sample) > _SAMPLE_LIMIT:
            names += ", ..."
        players += f" ({names})"

    motd = [
        format_description(line, color=color)
        for line in status.description.splitlines()
    ] or [""]

    lines = [
        f"  Version: {version}",
        f"  Players: {players}",
        f"  MOTD:    {motd[0]}",
    ]
    lines.extend(f"           {line}" for line in motd[1:])
    return lines


def print_status(display_name: str, status: ServerStatus, *, color: bool) -> None:
    """Print the status summary to stdout."""
    lines = render_status(status, color=color)
    if not color:
        print(display_name)
        print("\n".join(lines))
        return

    print_formatted_text(HTML("<b>{}</b>").format(display_name))
    for line in lines:
        print_formatted_text(ANSI(line))


def main() -> None:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_config()
    display_name, server = resolve_server(args.server, config)

    protocol_version = args.protocol_version
    if protocol_version is None:
        protocol_version = server.resolve_protocol_version(config.protocol_version)
    timeout = args.timeout if args.timeout is not None else config.timeout

    log.debug(
        "Querying %s:%d with protocol %d", server.host, server.port, protocol_version
    )
    client = StatusClient(
        server.host,
        server.port,
        protocol_version=protocol_version,
        timeout=timeout,
    )
    try:
        document = client.fetch_status()
        if args.json:
            print(json.dumps(document, indent=2, ensure_ascii=False))
            return
        status = ServerStatus.from_document(document)
        print_status(display_name, status, color=not args.no_color)
    except PingConnectionError as e:
        print(f"Connection failed: {e}", file=sys.stderr)
        sys.exit(1)
    except PingError as e:
        print(f"Invalid response from {display_name}: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
