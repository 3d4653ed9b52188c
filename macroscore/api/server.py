"""
Saved Score API

Small HTTP surface over the score store plus a stateless scoring endpoint.
The blueprint mounts on any Flask app, including the one inside the Dash
dashboard.
"""

from typing import Optional

from flask import Blueprint, Flask, jsonify, request
from loguru import logger

from ..models.scoring_engine import calculate_score
from ..storage.score_store import InvalidScoreRecordError, JsonScoreStore, SavedScore, ScoreStorageError
from ..utils.config_loader import ConfigLoader

ALLOWED_METHODS = 'GET, POST, DELETE, OPTIONS'


def create_api_blueprint(store: JsonScoreStore) -> Blueprint:
    """Build the ``/scores`` blueprint bound to ``store``."""
    api = Blueprint('scores_api', __name__)

    @api.after_request
    def allow_cross_origin(response):
        # The web client runs on a different port during local development
        response.headers['Access-Control-Allow-Origin'] = '*'
        response.headers['Access-Control-Allow-Methods'] = ALLOWED_METHODS
        response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
        return response

    @api.route('/health', methods=['GET'])
    def health():
        return jsonify({'status': 'ok', 'scores': len(store)})

    @api.route('/scores', methods=['GET'])
    def list_scores():
        return jsonify(store.list_records())

    @api.route('/scores', methods=['POST'])
    def save_score():
        payload = request.get_json(silent=True)
        try:
            score = SavedScore.from_dict(payload)
        except InvalidScoreRecordError as e:
            logger.warning(f"Rejected saved score payload: {e}")
            return jsonify({'error': str(e)}), 400

        try:
            store.append(score)
        except ScoreStorageError as e:
            logger.error(f"Error saving score {score.id}: {e}")
            return jsonify({'error': 'Failed to save score'}), 500

        return jsonify({'success': True, 'id': score.id})

    @api.route('/scores/<score_id>', methods=['DELETE'])
    def delete_score(score_id: str):
        try:
            store.delete(score_id)
        except ScoreStorageError as e:
            logger.error(f"Error deleting score {score_id}: {e}")
            return jsonify({'error': 'Failed to delete score'}), 500

        return jsonify({'success': True})

    @api.route('/score', methods=['POST'])
    def score_record():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify({'error': 'Indicator record must be a JSON object'}), 400

        try:
            result = calculate_score(payload, request.args.get('model'))
        except (ValueError, TypeError) as e:
            return jsonify({'error': str(e)}), 400

        logger.debug(f"Scored {result.model.value} record: {result.total_score} ({result.bias_label})")
        return jsonify(result.to_dict())

    return api


def register_api(app: Flask, store: JsonScoreStore, prefix: str = '/api') -> Flask:
    """Mount the score API on an existing Flask app."""
    app.register_blueprint(create_api_blueprint(store), url_prefix=prefix or None)
    logger.info(f"Score API mounted at {prefix or '/'} (store: {store.path.resolve()})")
    return app


def create_app(
    store: Optional[JsonScoreStore] = None,
    config: Optional[ConfigLoader] = None
) -> Flask:
    """Create a standalone Flask app serving the score API.

    Args:
        store: Score store; built from config when omitted
        config: Configuration; loaded from config/settings.yaml when omitted

    Returns:
        Flask application
    """
    config = config or ConfigLoader()

    if store is None:
        store = JsonScoreStore(
            config.get('storage.path', 'data/macro-scores.json'),
            max_entries=int(config.get('storage.max_entries', 50))
        )

    app = Flask(__name__)
    app.json.sort_keys = False
    register_api(app, store, config.get('server.api_prefix', '/api'))
    return app


def run_server(host: str = "127.0.0.1", port: int = 3001, debug: bool = False,
               config: Optional[ConfigLoader] = None) -> None:
    """Run the standalone API server."""
    app = create_app(config=config)
    logger.info(f"Score server running on http://{host}:{port}")
    app.run(host=host, port=port, debug=debug)
