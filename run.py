#!/usr/bin/env python3
"""Run the FastAPI backend server."""
import os
import sys
import socket

import uvicorn

from isl_announcer.cli import setup_logging


def find_available_port(start_port=8000, max_attempts=100):
    """Find an available port starting from start_port."""
    for port in range(start_port, start_port + max_attempts):
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                s.bind(('', port))
                return port
        except OSError:
            continue
    raise RuntimeError(f"Could not find an available port in range {start_port}-{start_port + max_attempts}")


def main():
    """Start the API server on the first free port."""
    setup_logging(os.getenv("ISL_VERBOSE", "") == "1")
    port = find_available_port(start_port=int(os.getenv("PORT", "8000")))

    print("Starting ISL Announcer API server...")
    print(f"Server will be available at: http://localhost:{port}")
    print(f"API docs at: http://localhost:{port}/docs")
    print("\nPress CTRL+C to stop the server\n")

    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=port,
        reload=os.getenv("ISL_RELOAD", "") == "1",
        log_level="info"
    )


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\n✓ Server stopped")
        sys.exit(0)
