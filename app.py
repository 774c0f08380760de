"""
app.py - Walkscore Flask Application
=====================================
Endpoints:
  GET  /health        — Liveness probe
  POST /score         — Score one pedestrian route   {route: {...}}
  POST /score/batch   — Score + rank alternatives    {routes: [...]} or a
                        raw routing response          {result: [...]}

The route JSON is the routing provider's own shape; fetching it is the
caller's job. Payload shape is checked here, before the engine runs.
"""

import os

from flask import Flask, request, jsonify
from flask_talisman import Talisman
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_cors import CORS

from config import (
    CORS_ORIGINS, MAX_BATCH_ROUTES, PORT, RATE_LIMITS, SCORE_RATE_LIMIT,
    setup_logging,
)
from scoring_engine import score, score_routes

log = setup_logging()

app = Flask(__name__)
# Keep breakdown ordering (zones by meters, turns by count) in responses
app.json.sort_keys = False

# ── CORS ──────────────────────────────────────────────────────────────────────
CORS(app, resources={r"/*": {"origins": CORS_ORIGINS}})

# ── Rate limiting ──────────────────────────────────────────────────────────────
limiter = Limiter(
    key_func=get_remote_address,
    app=app,
    default_limits=RATE_LIMITS,
    storage_uri="memory://",
    headers_enabled=True,
)

# ── Security headers via Talisman ─────────────────────────────────────────────
# JSON-only API: nothing is ever rendered, so the CSP can be closed.
# TLS is terminated by the proxy in front of the app.
Talisman(
    app,
    force_https=False,
    strict_transport_security=False,
    content_security_policy={"default-src": ["'none'"]},
    referrer_policy="no-referrer",
    x_content_type_options=True,
    x_xss_protection=True,
)


# ── Input validation helpers ──────────────────────────────────────────────────

def _validate_route(value, name="route"):
    """Return the route dict or raise ValueError with a descriptive message."""
    if value is None:
        raise ValueError(f"Missing {name}.")
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be an object.")

    maneuvers = value.get("maneuvers")
    if maneuvers is None:
        raise ValueError(f"Missing {name}.maneuvers.")
    if not isinstance(maneuvers, list):
        raise ValueError(f"{name}.maneuvers must be a list.")
    for i, m in enumerate(maneuvers):
        if not isinstance(m, dict) or "type" not in m:
            raise ValueError(f"{name}.maneuvers[{i}] must be an object with a type.")
    return value


def _validate_batch(body):
    """Return the list of route dicts from {routes: [...]} or {result: [...]}."""
    routes = body.get("routes")
    if routes is None:
        routes = body.get("result")
    if not isinstance(routes, list) or not routes:
        raise ValueError("routes must be a non-empty list.")
    if len(routes) > MAX_BATCH_ROUTES:
        raise ValueError(f"At most {MAX_BATCH_ROUTES} routes per request.")
    return [_validate_route(r, f"routes[{i}]") for i, r in enumerate(routes)]


def _json_body():
    body = request.get_json(silent=True)
    if not body or not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object.")
    return body


# ── Routes ────────────────────────────────────────────────────────────────────

@app.route("/health")
def health():
    return jsonify({"status": "ok"})


@app.route("/score", methods=["POST"])
@limiter.limit(SCORE_RATE_LIMIT)
def score_route():
    try:
        route = _validate_route(_json_body().get("route"))
    except ValueError as e:
        log.warning("Rejected /score payload: %s", e)
        return jsonify({"error": str(e)}), 400

    result = score(route)
    return jsonify(result.to_dict())


@app.route("/score/batch", methods=["POST"])
@limiter.limit(SCORE_RATE_LIMIT)
def score_batch():
    try:
        routes = _validate_batch(_json_body())
    except ValueError as e:
        log.warning("Rejected /score/batch payload: %s", e)
        return jsonify({"error": str(e)}), 400

    ranked = score_routes(routes)
    log.info("Ranked %d route(s), best index=%d score=%.1f",
             len(ranked), ranked[0]["index"], ranked[0]["score"])
    return jsonify({"routes": ranked})


@app.errorhandler(404)
def not_found_handler(e):
    return jsonify({"error": "Not found."}), 404


@app.errorhandler(405)
def method_not_allowed_handler(e):
    return jsonify({"error": "Method not allowed."}), 405


@app.errorhandler(429)
def ratelimit_handler(e):
    return jsonify({"error": "Too many requests. Please slow down."}), 429


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    # Local dev: use self-signed cert if available, plain HTTP otherwise.
    cert = os.path.join(os.path.dirname(__file__), "certs", "cert.pem")
    key  = os.path.join(os.path.dirname(__file__), "certs", "key.pem")

    if os.path.exists(cert) and os.path.exists(key):
        log.info("Walkscore  →  https://0.0.0.0:%d", PORT)
        app.run(host="0.0.0.0", port=PORT, debug=False, ssl_context=(cert, key))
    else:
        log.info("Walkscore  →  http://0.0.0.0:%d", PORT)
        app.run(host="0.0.0.0", port=PORT, debug=False)
