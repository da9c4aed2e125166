"""Vercel serverless function for computing round leaderboards."""

import json
import sys
from pathlib import Path
from urllib.parse import urlparse

import httpx

# Add the project root to the path so we can import picks modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from picks.config import Config
from picks.logger import setup_logger
from picks.report import ReportError, compute_all, compute_leaderboard, load_snapshot
from picks.scoring import ResultsUnavailable

logger = setup_logger(__name__)

Config.validate()


def handler(request):
    """Handle incoming requests to compute leaderboards.

    Accepts:
    - POST with JSON body: {"round": {...snapshot...}, "variant": "prizes"}
    - POST with JSON body: {"url": "https://...", "variant": "top-picks"}

    Without "variant", every registered leaderboard is computed. Returns JSON
    with the leaderboard standings.
    """
    # Handle CORS preflight
    if request.method == "OPTIONS":
        return create_response(
            "",
            status=204,
            headers={
                "Access-Control-Allow-Origin": "*",
                "Access-Control-Allow-Methods": "POST, OPTIONS",
                "Access-Control-Allow-Headers": "Content-Type",
            },
        )

    if request.method != "POST":
        return create_response(
            {"error": "Method not allowed. Use POST."},
            status=405,
        )

    try:
        content_type = request.headers.get("content-type", "")
        if "application/json" not in content_type:
            return create_response(
                {"error": f"Unsupported content type: {content_type}"},
                status=400,
            )

        data = json.loads(request.body.decode("utf-8"))
        if not isinstance(data, dict):
            return create_response(
                {"error": "Request body must be a JSON object"},
                status=400,
            )

        if "round" in data:
            round_data = data["round"]
        elif data.get("url"):
            round_data = fetch_round(data["url"])
        else:
            return create_response(
                {"error": "Missing 'round' or 'url' in request body"},
                status=400,
            )

        snapshot = load_snapshot(round_data)
        variant = data.get("variant")
        if variant:
            result = compute_leaderboard(snapshot, variant)
            return create_response(result.to_dict())

        return create_response(compute_all(snapshot).to_dict())

    except ResultsUnavailable as e:
        return create_response(
            {"error": str(e), "available": False},
            status=409,
        )
    except ReportError as e:
        return create_response(
            {"error": str(e)},
            status=400,
        )
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return create_response(
            {"error": f"Invalid JSON: {e}"},
            status=400,
        )
    except Exception as e:
        logger.exception("Unhandled error computing leaderboard")
        return create_response(
            {"error": f"Internal error: {e}"},
            status=500,
        )


def fetch_round(url: str) -> dict:
    """Fetch a round snapshot exported as JSON.

    Raises:
        ReportError: If the URL is invalid, unreachable, or not JSON
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ReportError(f"Invalid URL scheme: {parsed.scheme}")

    try:
        with httpx.Client(follow_redirects=True, timeout=Config.FETCH_TIMEOUT) as client:
            response = client.get(url)
            response.raise_for_status()
            return response.json()
    except httpx.HTTPStatusError as e:
        raise ReportError(f"HTTP error fetching URL: {e.response.status_code}")
    except httpx.RequestError as e:
        raise ReportError(f"Error fetching URL: {e}")
    except ValueError as e:
        raise ReportError(f"Round data at URL is not valid JSON: {e}")


def create_response(body, status: int = 200, headers: dict = None):
    """Create a response object for Vercel."""
    response_headers = {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": "*",
    }
    if headers:
        response_headers.update(headers)

    if isinstance(body, dict):
        body = json.dumps(body)

    # Return in format expected by Vercel Python runtime
    return {
        "statusCode": status,
        "headers": response_headers,
        "body": body,
    }
