import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

bp = Blueprint("meta", __name__)

API_VERSION = "1.0.0"


@bp.get("/")
def index():
    """
    Service Info
    ---
    tags: [Meta]
    responses:
      200:
        description: Service name, version and endpoint directory
    """
    return jsonify({
        "success": True,
        "message": "Freelance Marketplace API is running!",
        "version": API_VERSION,
        "endpoints": {
            "jobs": "/api/jobs",
            "latestJobs": "/api/jobs/latest",
            "myJobs": "/api/jobs/my-jobs/:email",
            "acceptJob": "/api/jobs/accept",
            "acceptedJobs": "/api/jobs/accepted/:email",
        },
    })


@bp.get("/health")
def health():
    """
    Health Check
    ---
    tags: [Meta]
    responses:
      200:
        description: Process health
        schema:
          type: object
          properties:
            success: { type: boolean }
            status: { type: string }
            timestamp: { type: string, format: date-time }
            uptime: { type: number }
    """
    return jsonify({
        "success": True,
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - current_app.config["STARTED_AT"], 3),
    })
