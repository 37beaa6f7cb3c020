"""
Main routes (health check).

Liveness only: does not call upstream, so a slow commerce API never makes
the backend look dead.
"""

from flask import Blueprint, jsonify

main_bp = Blueprint("main", __name__)


@main_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"}), 200
