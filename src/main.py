"""Main entry point for the Rates Aggregation Service."""

import argparse
import asyncio
import base64
import json
import sys
from datetime import datetime
from typing import Any, Optional

from src.config import configure_logging, get_logger, settings
from src.services import RatesController

logger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Content-Type": "application/json",
}


def health_check() -> dict[str, Any]:
    """Liveness payload for GET /api/health."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "version": settings.api_version,
    }


async def handle_request(
    method: str,
    path: str,
    body: Optional[str] = None,
    controller: Optional[RatesController] = None,
) -> tuple[int, Optional[dict[str, Any]]]:
    """Route one HTTP request.

    Args:
        method: HTTP method
        path: Request path without query string
        body: Raw request body
        controller: Rates controller; a default one is created if omitted

    Returns:
        Tuple of (status code, response payload or None for an empty body)
    """
    method = method.upper()
    path = path.split("?", 1)[0].rstrip("/") or "/"

    if method == "OPTIONS":
        return 200, None

    if method == "POST" and path == "/api/rates":
        controller = controller or RatesController()
        return await controller.get_rates(body)

    if method == "GET" and path == "/api/health":
        return 200, health_check()

    logger.info("No route for request", method=method, path=path)
    return 404, {
        "success": False,
        "error": "Endpoint not found",
        "message": "The requested API endpoint does not exist.",
    }


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda handler for API Gateway proxy events.

    Args:
        event: API Gateway proxy event
        context: Lambda context

    Returns:
        API Gateway proxy response
    """
    request_id = getattr(context, "aws_request_id", None)
    method = event.get("httpMethod") or "GET"
    path = event.get("path") or "/"

    logger.info(
        "Lambda invoked",
        environment=settings.environment,
        request_id=request_id,
        method=method,
        path=path,
    )

    try:
        body = event.get("body")
        if body and event.get("isBase64Encoded"):
            body = base64.b64decode(body).decode("utf-8")

        status_code, payload = asyncio.run(handle_request(method, path, body))
    except Exception as e:
        logger.error(
            "Lambda execution failed",
            request_id=request_id,
            error=str(e),
            exc_info=True,
        )
        status_code, payload = 500, {
            "success": False,
            "error": "Internal Server Error",
            "message": str(e),
        }

    return {
        "statusCode": status_code,
        "headers": CORS_HEADERS,
        "body": json.dumps(payload) if payload is not None else "",
    }


async def main(argv: Optional[list[str]] = None) -> int:
    """Look up rates for a booking query read from a file or stdin.

    Returns:
        Exit code: 0 when the lookup succeeded, 1 otherwise
    """
    parser = argparse.ArgumentParser(description="Fetch rates for a booking query")
    parser.add_argument(
        "query_file",
        nargs="?",
        type=argparse.FileType("r"),
        default=sys.stdin,
        help="JSON booking query (defaults to stdin)",
    )
    args = parser.parse_args(argv)

    logger.info("Starting rates lookup", environment=settings.environment)

    status_code, payload = await RatesController().get_rates(args.query_file.read())
    print(json.dumps(payload, indent=2, default=str))
    return 0 if status_code == 200 else 1


def run_sync() -> int:
    """Run the async main function synchronously.

    Returns:
        Exit code from main()
    """
    configure_logging()
    return asyncio.run(main())


if __name__ == "__main__":
    sys.exit(run_sync())
