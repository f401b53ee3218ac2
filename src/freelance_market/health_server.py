"""
Health check HTTP server for liveness and readiness probes.

Also serves the Prometheus metrics registry at /metrics.
"""

import sqlite3
from pathlib import Path
from typing import Any

from flask import Flask, Response, jsonify
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from freelance_market import __version__
from freelance_market.kernel.database import TABLES
from freelance_market.kernel.logging import get_logger

logger = get_logger(__name__)

app = Flask(__name__)

# Global state - set by initialize_health_server()
_db_path: Path | None = None


def initialize_health_server(db_path: str | Path) -> None:
    """
    Point the health checks at a marketplace database.

    Args:
        db_path: Path to SQLite database
    """
    global _db_path
    _db_path = Path(db_path)
    logger.info("Health server initialized", db_path=str(_db_path))


@app.route("/health/live", methods=["GET"])
def liveness() -> tuple[Response, int]:
    """Liveness probe - the process is up."""
    return jsonify({"status": "alive", "service": "freelance-market"}), 200


@app.route("/health/ready", methods=["GET"])
def readiness() -> tuple[Response, int]:
    """
    Readiness probe - the database file exists and answers a query.

    Returns:
        JSON response with 200 if ready, 503 if not ready
    """
    if _db_path is None:
        logger.error("Readiness check failed: DB path not initialized")
        return jsonify({"status": "not_ready", "reason": "database_path_not_initialized"}), 503

    if not _db_path.exists():
        logger.error("Readiness check failed: DB file does not exist", db_path=str(_db_path))
        return (
            jsonify(
                {
                    "status": "not_ready",
                    "reason": "database_file_not_found",
                    "db_path": str(_db_path),
                }
            ),
            503,
        )

    try:
        conn = sqlite3.connect(str(_db_path), timeout=1.0)
        try:
            project_count = conn.execute("SELECT COUNT(*) FROM projects").fetchone()[0]
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.error("Readiness check failed: DB error", error=str(e))
        return (
            jsonify(
                {
                    "status": "not_ready",
                    "reason": "database_operational_error",
                    "error": str(e),
                }
            ),
            503,
        )

    logger.debug("Readiness check passed", project_count=project_count)
    return jsonify({"status": "ready", "database": "accessible"}), 200


@app.route("/health", methods=["GET"])
def detailed_health() -> tuple[Response, int]:
    """
    Detailed health check with per-table row counts.

    Returns:
        JSON response, 200 when healthy and 503 when degraded
    """
    health_data: dict[str, Any] = {
        "status": "healthy",
        "service": "freelance-market",
        "version": __version__,
    }

    if _db_path and _db_path.exists():
        try:
            conn = sqlite3.connect(str(_db_path), timeout=1.0)
            try:
                counts = {
                    table: conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
                    for table in TABLES
                }
                page_count = conn.execute("PRAGMA page_count").fetchone()[0]
                page_size = conn.execute("PRAGMA page_size").fetchone()[0]
            finally:
                conn.close()

            health_data["database"] = {
                "status": "healthy",
                "path": str(_db_path),
                "row_counts": counts,
                "size_mb": round((page_count * page_size) / (1024 * 1024), 2),
            }
        except sqlite3.Error as e:
            logger.error("Database health check failed", error=str(e))
            health_data["database"] = {"status": "unhealthy", "error": str(e)}
            health_data["status"] = "degraded"
    else:
        health_data["database"] = {"status": "not_initialized"}
        health_data["status"] = "degraded"

    status_code = 200 if health_data["status"] == "healthy" else 503
    return jsonify(health_data), status_code


@app.route("/metrics", methods=["GET"])
def metrics() -> Response:
    """Prometheus text exposition of the default registry."""
    return Response(generate_latest(), content_type=CONTENT_TYPE_LATEST)


def run_health_server(port: int = 8080, debug: bool = False) -> None:
    """
    Run the health check server.

    Args:
        port: Port to listen on (default: 8080)
        debug: Enable Flask debug mode (default: False)
    """
    logger.info("Starting health check server", port=port)
    app.run(host="0.0.0.0", port=port, debug=debug)


if __name__ == "__main__":
    # python -m freelance_market.health_server
    initialize_health_server(".market.db")
    run_health_server(port=8080, debug=True)
