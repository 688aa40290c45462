import logging
import math

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

import config
from data_access.repositories import HighScoreRepository
from database import init_database
from services.feedback import FeedbackService
from services.game_session import GameSession


def build_default_session() -> GameSession:
    """Session backed by the SQLite high score store, with its tick loop running."""
    init_database()
    session = GameSession(
        high_scores=HighScoreRepository(),
        feedback=FeedbackService(muted=config.SNAKE_MUTED),
    )
    session.open()
    return session


def create_app(session: GameSession = None) -> Flask:
    """
    Create the HTTP driver around one game session.

    The front end polls GET /api/game once per frame and posts controls.
    """
    app = Flask(__name__)
    if session is None:
        session = build_default_session()
    app.extensions["game_session"] = session

    # Enable CORS for API routes so the browser front end (different origin) can call Flask
    CORS(app, resources={r"/api/*": {"origins": config.get_cors_origins()}})

    def _json_body() -> dict:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise ValueError("Expected a JSON object body")
        return payload

    @app.errorhandler(ValueError)
    def handle_value_error(error):
        return jsonify({"error": str(error)}), 400

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        if isinstance(error, HTTPException):
            return error
        logging.error(f"Unhandled error on {request.path}: {error}")
        return jsonify({"error": "Internal server error"}), 500

    @app.route("/api/game", methods=["GET"])
    def get_game():
        """Current snapshot plus high score and mute flag."""
        return jsonify(session.snapshot())

    @app.route("/api/game/board", methods=["GET"])
    def get_board():
        board = session.engine.get_current_state().print_board()
        return board, 200, {"Content-Type": "text/plain; charset=utf-8"}

    @app.route("/api/game/start", methods=["POST"])
    def start_game():
        session.start()
        return jsonify(session.snapshot())

    @app.route("/api/game/pause", methods=["POST"])
    def pause_game():
        session.pause()
        return jsonify(session.snapshot())

    @app.route("/api/game/reset", methods=["POST"])
    def reset_game():
        session.reset()
        return jsonify(session.snapshot())

    @app.route("/api/game/toggle", methods=["POST"])
    def toggle_game():
        """Play/pause button."""
        session.toggle()
        return jsonify(session.snapshot())

    @app.route("/api/game/direction", methods=["POST"])
    def change_direction():
        """
        Request a turn.

        Body: {"direction": "UP"}, {"key": "ArrowUp"} or {"button": "up"}.
        Reverse turns and unmapped keys are ignored, reported as accepted=false.
        """
        payload = _json_body()

        if "direction" in payload:
            direction = str(payload["direction"]).upper()
            accepted = session.request_direction(direction)
        elif "key" in payload:
            accepted = session.press_key(str(payload["key"]))
        elif "button" in payload:
            accepted = session.press_button(str(payload["button"]))
        else:
            raise ValueError("Provide one of 'direction', 'key' or 'button'")

        data = session.snapshot()
        data["accepted"] = accepted
        return jsonify(data)

    @app.route("/api/game/swipe", methods=["POST"])
    def swipe():
        """Body: {"dx": <pixels>, "dy": <pixels>} between touch start and end."""
        payload = _json_body()
        try:
            dx = float(payload["dx"])
            dy = float(payload["dy"])
        except (KeyError, TypeError) as e:
            raise ValueError(f"Swipe needs numeric dx and dy: {e}")
        if not (math.isfinite(dx) and math.isfinite(dy)):
            raise ValueError("Swipe dx and dy must be finite numbers")

        accepted = session.swipe(dx, dy)
        data = session.snapshot()
        data["accepted"] = accepted
        return jsonify(data)

    @app.route("/api/high-score", methods=["GET"])
    def get_high_score():
        return jsonify({"highScore": session.high_score})

    @app.route("/api/sound/mute", methods=["POST"])
    def toggle_mute():
        return jsonify({"muted": session.toggle_mute()})

    return app


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    create_app().run(host=config.SNAKE_HOST, port=config.SNAKE_PORT)
