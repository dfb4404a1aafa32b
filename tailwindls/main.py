"""
Main entry point for the Tailwind CSS Language Server.

This file is executed when running: python -m tailwindls

The server communicates with editors via stdin/stdout using JSON-RPC.
"""
import os
import sys

from tailwindls.lsp.server import create_server

DEBUG_ADDRESS = ("127.0.0.1", 5678)


def main():
    """Start the language server on stdin/stdout."""

    # stdout carries the protocol, so debug output goes to stderr.
    if os.getenv("TAILWINDLS_DEBUG"):
        print("tailwindls starting in debug mode", file=sys.stderr)
        print(f"Waiting for debugger to attach on port {DEBUG_ADDRESS[1]}...", file=sys.stderr)
        try:
            import debugpy  # type: ignore
            debugpy.listen(DEBUG_ADDRESS)
            debugpy.wait_for_client()
            print("Debugger attached, continuing", file=sys.stderr)
        except ImportError:
            print("debugpy not available - install with: pip install -e .[dev]", file=sys.stderr)

    server = create_server()

    # Start the server - it will listen on stdin/stdout for LSP messages
    # from the editor client
    server.start_io()

if __name__ == "__main__":
    main()
