from flask import Flask, request, jsonify
from flask_cors import CORS
from brokerage_engine import PayoutProcessor
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (the dashboard is served from another origin)
CORS(app)

processor = PayoutProcessor()


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Brokerage Payout Engine API",
        "version": "1.0",
        "endpoints": {
            "compute_breakdown": "/compute_breakdown [POST]",
            "compute_batch": "/compute_batch [POST]",
            "simulate": "/simulate [POST]",
            "statement": "/statement [POST]",
            "validate_config": "/validate_config [POST]",
            "validate_override": "/validate_override [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


def _run(handler, label):
    try:
        input_data = request.get_json(force=True, silent=True)

        if not isinstance(input_data, dict) or not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        logger.info(f"Processing {label} request")
        result = handler(input_data)
        return jsonify(result), 200

    except (ValueError, KeyError, TypeError) as e:
        # Validation errors from engine
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        # Unexpected errors
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "error": "An unexpected error occurred during processing",
            "status": "failed"
        }), 500


@app.route("/compute_breakdown", methods=["POST"])
def compute_breakdown():
    """Split one gross amount across the hierarchy"""
    return _run(processor.process_from_dict, "breakdown")


@app.route("/compute_batch", methods=["POST"])
def compute_batch():
    """Attach breakdowns to every mapped transaction in a batch"""
    return _run(processor.batch_from_dict, "batch")


@app.route("/simulate", methods=["POST"])
def simulate():
    """Preview a sharing configuration against a test amount"""
    return _run(processor.simulate_from_dict, "simulation")


@app.route("/statement", methods=["POST"])
def statement():
    """Monthly statement for one member"""
    return _run(processor.statement_from_dict, "statement")


@app.route("/validate_config", methods=["POST"])
def validate_config():
    """Check a sharing configuration before it is saved"""
    return _run(processor.validate_config_from_dict, "config validation")


@app.route("/validate_override", methods=["POST"])
def validate_override():
    """Check a per-user sharing override and return the member with it applied"""
    return _run(processor.validate_override_from_dict, "override validation")


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
