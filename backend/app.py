import os
import logging
import tempfile
from flask import Flask, jsonify, request, send_file
from flask_cors import CORS
from dotenv import load_dotenv

from domain.constants import BOARD_SIZE
from main import SnakeGame
from services.game_loop import GameAlreadyRunningError, GameLoop
from services.video_generator import SnakeVideoGenerator

load_dotenv()

app = Flask(__name__)
logging.basicConfig(level=logging.INFO)

# Enable CORS for API routes so a browser frontend on another origin can play
# Allowed origins can be configured via CORS_ALLOWED_ORIGINS env var (comma-separated)
allowed_origins_env = os.getenv("CORS_ALLOWED_ORIGINS")
if allowed_origins_env:
    allowed_origins = [o.strip() for o in allowed_origins_env.split(",") if o.strip()]
else:
    # sensible defaults for local dev
    allowed_origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

CORS(app, resources={r"/api/*": {"origins": allowed_origins}})

# One game per server process, ticked by a background timer
game_loop = GameLoop(SnakeGame(board_size=int(os.getenv("SNAKE_BOARD_SIZE", BOARD_SIZE))))
renderer = SnakeVideoGenerator()


def _remove_file(path: str):
    try:
        os.remove(path)
    except OSError as error:
        logging.warning(f"Could not remove temporary file {path}: {error}")


@app.route("/api/game", methods=["GET"])
def get_game():
    """
    Get the current snapshot of the game.

    Returns score, speed (the period the next tick is scheduled with),
    status and one classification per cell ("food", "snake" or "empty")
    in row-major order.
    """
    try:
        return jsonify(game_loop.snapshot().to_dict())
    except Exception as error:
        logging.error(f"Error fetching game state: {error}")
        return jsonify({"error": "Failed to load game state"}), 500


@app.route("/api/game/start", methods=["POST"])
def start_game():
    """
    Start a new session.

    Returns:
    - 200: snapshot of the fresh session
    - 409: a session is still running
    """
    try:
        state = game_loop.start()
        logging.info("New game started via API")
        return jsonify(state.to_dict()), 200

    except GameAlreadyRunningError as error:
        return jsonify({"error": str(error)}), 409

    except Exception as error:
        logging.error(f"Error starting game: {error}")
        return jsonify({"error": "Failed to start game"}), 500


@app.route("/api/game/key", methods=["POST"])
def press_key():
    """
    Forward a raw key name (e.g. "ArrowUp") to the game.

    Unrecognized keys are accepted by the endpoint but ignored by the game;
    the response says whether the key changed the pending direction.
    """
    payload = request.get_json(silent=True) or {}
    key = payload.get("key")
    if not isinstance(key, str):
        return jsonify({"error": "Missing 'key' in request body"}), 400

    try:
        accepted = game_loop.on_key(key)
        return jsonify({"key": key, "accepted": accepted}), 200
    except Exception as error:
        logging.error(f"Error handling key {key!r}: {error}")
        return jsonify({"error": "Failed to handle key"}), 500


@app.route("/api/game/frame.png", methods=["GET"])
def get_frame():
    """Render the current board as a PNG image."""
    try:
        png = renderer.render_png(game_loop.snapshot())
        return app.response_class(png, mimetype="image/png")
    except Exception as error:
        logging.error(f"Error rendering frame: {error}")
        return jsonify({"error": "Failed to render frame"}), 500


@app.route("/api/game/video", methods=["GET"])
def get_video():
    """
    Render the current session (every snapshot since the last start) as MP4.

    Returns:
    - 200: the video file
    - 404: nothing has been played yet
    """
    try:
        history = list(game_loop.game.history)
        if not history:
            return jsonify({"error": "No session recorded yet"}), 404

        # Each request gets its own file, removed once the response is sent
        with tempfile.NamedTemporaryFile(prefix="gridsnake_", suffix=".mp4", delete=False) as tmp:
            output_path = tmp.name
        try:
            video_path = renderer.generate_video(history, output_path=output_path)
        except Exception:
            _remove_file(output_path)
            raise

        response = send_file(video_path, mimetype="video/mp4")
        response.call_on_close(lambda: _remove_file(video_path))
        return response

    except Exception as error:
        logging.error(f"Error generating video: {error}")
        import traceback
        logging.error(traceback.format_exc())
        return jsonify({"error": "Failed to generate video"}), 500


if __name__ == "__main__":
    app.run(debug=os.getenv("FLASK_DEBUG"))
