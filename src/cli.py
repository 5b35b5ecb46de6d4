#!/usr/bin/env python3
"""
CLI for the live tree server.

Usage:
    python -m src.cli serve --root ./scripts --port 8080
    python -m src.cli tree --api-port 8080
    python -m src.cli reload --api-port 8080
"""

import argparse
import logging
import os
import signal
import sys
import time
from pathlib import Path

import httpx
from dotenv import load_dotenv

# Load .env from project root
_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    load_dotenv()

from src.livetree import DirectoryWatcher, WatcherConfig
from src.liveserver import LiveServerService, ServerConfig


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("cli")


DEFAULT_HOST = os.environ.get("LIVETREE_HOST", "0.0.0.0")
DEFAULT_PORT = int(os.environ.get("LIVETREE_PORT", "8080"))


class GracefulShutdown:
    """Handle graceful shutdown on SIGINT/SIGTERM."""

    def __init__(self):
        self.should_exit = False
        signal.signal(signal.SIGINT, self._handler)
        signal.signal(signal.SIGTERM, self._handler)

    def _handler(self, signum, frame):
        logger.info("Received shutdown signal, stopping...")
        self.should_exit = True


def _api_base(args) -> str:
    return f"http://{args.api_host}:{args.api_port}"


def _error_text(resp: httpx.Response) -> str:
    try:
        return resp.json().get("error", resp.text)
    except ValueError:
        return resp.text


def cmd_serve(args):
    """Run the directory watcher and the live server."""
    if not args.root:
        logger.error("No root directory given. Use --root or set LIVETREE_ROOT")
        sys.exit(1)

    root = Path(args.root).resolve()
    if not root.is_dir():
        logger.error(f"Root path is not a directory: {root}")
        sys.exit(1)

    lua_dir = Path(args.lua_dir).resolve() if args.lua_dir else None
    if lua_dir is not None and not lua_dir.is_dir():
        logger.error(f"Script directory does not exist: {lua_dir}")
        sys.exit(1)

    config = WatcherConfig(hash_algorithm=args.hash_algorithm)
    shutdown = GracefulShutdown()

    with DirectoryWatcher(root, config=config) as watcher:
        service = LiveServerService(
            args.host,
            args.port,
            ServerConfig(root_dir=root, lua_dir=lua_dir),
            watcher,
        )
        service.start()

        logger.info(f"Watching {root} ({len(watcher)} entries)")
        if lua_dir:
            logger.info(f"Serving scripts from {lua_dir}")
        logger.info(f"Listening on http://{args.host}:{args.port}")
        logger.info("Press Ctrl+C to stop")

        while not shutdown.should_exit:
            time.sleep(0.5)

        service.stop()

    logger.info("Server stopped")


def cmd_tree(args):
    """Print the tree as seen by a running server."""
    api_base = _api_base(args)
    try:
        with httpx.Client(timeout=10.0) as client:
            resp = client.get(f"{api_base}/api/tree")
    except httpx.HTTPError as exc:
        logger.error(f"Failed to reach server at {api_base}: {exc}")
        sys.exit(1)

    if resp.status_code != 200:
        logger.error(f"Failed to fetch tree: {_error_text(resp)}")
        sys.exit(1)

    entries = sorted(resp.json(), key=lambda e: e["path"])
    print(f"\nEntries ({len(entries)}):")
    for entry in entries:
        suffix = "/" if entry["entry_type"] == "directory" else ""
        print(f"  {entry['path']}{suffix}")


def cmd_reload(args):
    """Ask a running server to push every file to its clients again."""
    api_base = _api_base(args)
    try:
        with httpx.Client(timeout=30.0) as client:
            resp = client.post(f"{api_base}/api/reload")
    except httpx.HTTPError as exc:
        logger.error(f"Failed to reach server at {api_base}: {exc}")
        sys.exit(1)

    if resp.status_code != 200:
        logger.error(f"Failed to reload: {_error_text(resp)}")
        sys.exit(1)

    print("Reload sent. Connected clients will refetch all files.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Live tree server: watch a directory and push changes to clients",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve a directory
  python -m src.cli serve --root ./scripts --port 8080

  # Serve with a fallback directory of client scripts
  python -m src.cli serve --root ./scripts --lua-dir ./lua

  # Show the tree of a running server
  python -m src.cli tree --api-port 8080
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Watch a directory and serve it")
    serve_parser.add_argument("--root", default=os.environ.get("LIVETREE_ROOT"), help="Directory to watch (or LIVETREE_ROOT)")
    serve_parser.add_argument("--host", default=DEFAULT_HOST, help=f"Server host (default: {DEFAULT_HOST})")
    serve_parser.add_argument("--port", type=int, default=DEFAULT_PORT, help=f"Server port (default: {DEFAULT_PORT})")
    serve_parser.add_argument("--lua-dir", default=os.environ.get("LIVETREE_LUA_DIR"), help="Fallback directory of client scripts (or LIVETREE_LUA_DIR)")
    serve_parser.add_argument("--hash-algorithm", default="sha256", help="Content hash algorithm (default: sha256)")
    serve_parser.set_defaults(func=cmd_serve)

    tree_parser = subparsers.add_parser("tree", help="List the tree of a running server")
    tree_parser.add_argument("--api-host", default="localhost", help="Server host (default: localhost)")
    tree_parser.add_argument("--api-port", type=int, default=DEFAULT_PORT, help=f"Server port (default: {DEFAULT_PORT})")
    tree_parser.set_defaults(func=cmd_tree)

    reload_parser = subparsers.add_parser("reload", help="Make connected clients refetch all files")
    reload_parser.add_argument("--api-host", default="localhost", help="Server host (default: localhost)")
    reload_parser.add_argument("--api-port", type=int, default=DEFAULT_PORT, help=f"Server port (default: {DEFAULT_PORT})")
    reload_parser.set_defaults(func=cmd_reload)

    return parser


def main():
    args = build_parser().parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    args.func(args)


if __name__ == "__main__":
    main()
