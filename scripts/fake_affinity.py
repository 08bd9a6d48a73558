#!/usr/bin/env python3
"""
Fake affinity API server for local development and testing.

Implements the two endpoints used by affinity_suggestions:
- POST /affinity-ml-hire          ranked suggestions for a work offer
- POST /affinity-ml-hire/change   record an accept/discard decision

Any path may be prefixed with /status/<code>/ to force that response status,
e.g. a base URL of http://127.0.0.1:9010/status/503/ makes every call fail
with 503.

Run with: python scripts/fake_affinity.py --port 9010 --api-key dev-key
Then configure: urls: {development: "http://127.0.0.1:9010"}
"""

import argparse
import json
import uuid
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import urlparse

VALID_ACTIONS = {"aceptar", "descartar"}

# Fake ranked candidates, returned for every work offer
FAKE_SUGGESTIONS = [
    {"match_user_id": 123, "affinity": 0.91, "rank": 1, "model_version": "fake-1"},
    {"match_user_id": 456, "affinity": 0.78, "rank": 2, "model_version": "fake-1"},
    {"match_user_id": 789, "affinity": 0.42, "rank": 3, "model_version": "fake-1"},
]

# Decisions recorded since startup
RECORDED_DECISIONS: list[dict] = []


class FakeAffinityHandler(BaseHTTPRequestHandler):
    """HTTP handler implementing fake affinity API endpoints."""

    api_key: str | None = None
    quiet: bool = False

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        """Override to add prefix."""
        if not self.quiet:
            print(f"[FakeAffinity] {args[0]}")

    def send_json(self, data: dict, status: int = 200) -> None:
        """Send a JSON response."""
        body = json.dumps(data).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def send_empty(self, status: int = 200) -> None:
        self.send_response(status)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def send_error_json(self, status: int, message: str) -> None:
        self.send_json({"success": False, "message": message}, status=status)

    def do_POST(self) -> None:
        """Handle POST requests."""
        path = urlparse(self.path).path.strip("/")

        content_length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(content_length).decode() if content_length > 0 else ""

        # Forced status: /status/<code>/<endpoint>
        if path.startswith("status/"):
            parts = path.split("/", 2)
            code = parts[1] if len(parts) > 1 else ""
            try:
                self.send_error_json(int(code), f"Forced status {code}")
            except ValueError:
                self.send_error_json(400, f"Invalid forced status: {code}")
            return

        if self.api_key and self.headers.get("x-api-key") != self.api_key:
            self.send_error_json(403 if self.headers.get("x-api-key") else 401, "Invalid API key")
            return

        try:
            data = json.loads(body) if body else {}
        except json.JSONDecodeError:
            self.send_error_json(400, "Invalid JSON body")
            return
        if not isinstance(data, dict):
            self.send_error_json(400, "JSON body must be an object")
            return

        if path == "affinity-ml-hire":
            self.handle_suggestions(data)
        elif path == "affinity-ml-hire/change":
            self.handle_change(data)
        else:
            self.send_error_json(404, f"Unknown endpoint: /{path}")

    def handle_suggestions(self, data: dict) -> None:
        """Return the fake ranked list, wrapped the way the real service does."""
        for key in ("business_user_id", "work_offer_id"):
            if not isinstance(data.get(key), int):
                self.send_error_json(400, f"'{key}' must be an integer")
                return

        self.send_json(
            {
                "success": True,
                "message": "Se retorna las afinidades",
                "result": {
                    "uuid": uuid.uuid4().hex,
                    "results": FAKE_SUGGESTIONS,
                },
            }
        )

    def handle_change(self, data: dict) -> None:
        """Record a decision. Success is signalled by status alone."""
        for key in ("business_user_id", "match_user_id", "work_offer_id"):
            if not isinstance(data.get(key), int):
                self.send_error_json(400, f"'{key}' must be an integer")
                return
        if not isinstance(data.get("uuid"), str):
            self.send_error_json(400, "'uuid' must be a string")
            return
        if data.get("action") not in VALID_ACTIONS:
            self.send_error_json(400, f"Unknown action: {data.get('action')!r}")
            return

        RECORDED_DECISIONS.append(data)
        self.send_empty(200)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run fake affinity API server")
    parser.add_argument(
        "--port",
        type=int,
        default=9010,
        help="Port to listen on (default: 9010)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--api-key",
        type=str,
        help="Require this x-api-key header (default: accept any)",
    )
    args = parser.parse_args()

    FakeAffinityHandler.api_key = args.api_key
    server = HTTPServer((args.host, args.port), FakeAffinityHandler)
    print(f"Fake affinity API running at http://{args.host}:{args.port}")
    print(f"Force an error status with http://{args.host}:{args.port}/status/<code>/")
    print()

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nShutting down...")
        server.shutdown()


if __name__ == "__main__":
    main()
