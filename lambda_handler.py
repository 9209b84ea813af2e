"""
AWS Lambda handler for the Brokerage Payout Engine API.

This is the production entry point for AWS Lambda deployments.
For local development, use main.py (Flask app) instead.
"""

import base64
import json
import logging

from brokerage_engine import PayoutProcessor
from brokerage_engine.settings import ENVIRONMENT

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Initialize processor (reused across warm invocations)
processor = PayoutProcessor()

# CORS headers for API Gateway
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}

POST_ROUTES = {
    "/compute_breakdown": processor.process_from_dict,
    "/compute_batch": processor.batch_from_dict,
    "/simulate": processor.simulate_from_dict,
    "/statement": processor.statement_from_dict,
    "/validate_config": processor.validate_config_from_dict,
    "/validate_override": processor.validate_override_from_dict,
}


def _response(status_code, body):
    return {"statusCode": status_code, "headers": CORS_HEADERS, "body": json.dumps(body)}


def lambda_handler(event, context):
    """
    Main Lambda entry point.

    Handles API Gateway events for:
    - GET /health, GET /api
    - POST routes listed in POST_ROUTES
    - OPTIONS (CORS preflight)
    """
    http_method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    if http_method == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    # Supports both REST API and HTTP API formats
    path = event.get("path") or event.get("rawPath", "")

    if path == "/health" and http_method == "GET":
        return _response(200, {"status": "healthy", "environment": ENVIRONMENT})
    elif path == "/api" and http_method == "GET":
        return handle_api_info()
    elif path in POST_ROUTES and http_method == "POST":
        return handle_post(event, POST_ROUTES[path])
    else:
        return _response(404, {"error": "Not found", "path": path})


def handle_api_info():
    """API information endpoint."""
    return _response(
        200,
        {
            "status": "ok",
            "message": "Brokerage Payout Engine API",
            "version": "1.0",
            "environment": ENVIRONMENT,
            "runtime": "AWS Lambda",
            "endpoints": {path: f"{path} [POST]" for path in POST_ROUTES} | {"health": "/health [GET]"},
        },
    )


def handle_post(event, handler):
    """Parse the request body and run it through a processor entry point."""
    try:
        body = event.get("body", "")
        if isinstance(body, str):
            if not body:
                return _response(400, {"error": "No input data provided", "status": "failed"})
            # Handle base64 encoded body (API Gateway)
            if event.get("isBase64Encoded"):
                body = base64.b64decode(body).decode("utf-8")
            input_data = json.loads(body)
        else:
            input_data = body

        if not isinstance(input_data, dict) or not input_data:
            return _response(400, {"error": "No input data provided", "status": "failed"})

        result = handler(input_data)
        return _response(200, result)

    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {str(e)}")
        return _response(400, {"error": f"Invalid JSON: {str(e)}", "status": "failed"})

    except (ValueError, KeyError, TypeError) as e:
        # Validation errors from engine (missing fields, invalid amounts, bad config)
        logger.error(f"Validation error: {str(e)}")
        return _response(400, {"error": f"Validation error: {str(e)}", "status": "validation_failed"})

    except Exception as e:
        # Log details but return a generic message to avoid information disclosure
        logger.error(f"Unexpected processing error: {str(e)}", exc_info=True)
        return _response(500, {"error": "An unexpected error occurred during processing", "status": "failed"})
