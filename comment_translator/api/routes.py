"""
API Routes
==========
Flask blueprints for all API endpoints.
"""
import time
import sqlite3
from flask import Blueprint, request, jsonify, current_app

from comment_translator import __version__
from comment_translator.config import config, SUPPORTED_LANGUAGES
from comment_translator.models.schemas import AnnotateRequest, HealthStatus
from comment_translator.services.comment_extractor import supported_comment_languages
from comment_translator.services.orchestrator import CommentTranslator, get_comment_translator
from comment_translator.api.middleware import rate_limit, require_api_key
from comment_translator.utils.validators import (
    validate_language,
    validate_dictionary_entries,
    normalize_entries
)
from comment_translator.utils.logging import get_logger, log_buffer


def _translator() -> CommentTranslator:
    """Orchestrator injected into the app, or the process-wide one."""
    return current_app.config.get('COMMENT_TRANSLATOR') or get_comment_translator()


def create_annotate_blueprint() -> Blueprint:
    """Create annotation routes blueprint."""
    bp = Blueprint('annotate', __name__, url_prefix='/api')
    logger = get_logger().api_logger

    @bp.route('/annotate', methods=['POST'])
    @rate_limit
    def annotate():
        """Run one translation cycle over a document."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({'error': 'JSON body required'}), 400

        req = AnnotateRequest.from_json(
            data,
            default_target=config.translation.default_target_language,
            default_source=config.translation.source_language
        )
        errors = req.validate()
        if errors:
            return jsonify({'error': '; '.join(errors)}), 400

        start = time.time()
        result = _translator().process_document(
            req.text, req.language_id, req.target_lang, req.base_offset, req.source_lang
        )
        logger.info(
            f"Annotated {req.language_id} document: {len(result.decorations)} decorations "
            f"in {time.time() - start:.2f}s"
        )

        if result.warning:
            return jsonify(result.to_dict()), 422
        return jsonify(result.to_dict())

    return bp


def create_dictionary_blueprint() -> Blueprint:
    """Create dictionary routes blueprint."""
    bp = Blueprint('dictionary', __name__, url_prefix='/api/dictionary')
    logger = get_logger().api_logger

    @bp.route('', methods=['GET'])
    def dictionary_overview():
        dictionary = _translator().dictionary
        return jsonify({
            'languages': dictionary.languages(),
            'stats': dictionary.get_stats()
        })

    @bp.route('/<lang>', methods=['GET'])
    def get_entries(lang: str):
        """All stored translations for one language."""
        valid, error = validate_language(lang)
        if not valid:
            return jsonify({'error': error}), 400
        entries = _translator().dictionary.get(lang)
        return jsonify({'language': lang, 'entries': entries, 'count': len(entries)})

    @bp.route('/<lang>', methods=['POST'])
    @require_api_key
    def merge_entries(lang: str):
        """Merge phrase -> replacement pairs into a language's dictionary."""
        valid, error = validate_language(lang)
        if not valid:
            return jsonify({'error': error}), 400

        data = request.get_json(silent=True) or {}
        entries = data.get('entries')
        valid, error = validate_dictionary_entries(entries)
        if not valid:
            return jsonify({'error': error}), 400

        try:
            merged = _translator().dictionary.merge(lang, normalize_entries(entries))
        except sqlite3.Error as e:
            logger.error(f"Dictionary merge failed: {e}")
            return jsonify({'error': 'Dictionary merge failed'}), 500

        return jsonify({'language': lang, 'merged': merged})

    @bp.route('/<lang>', methods=['DELETE'])
    @require_api_key
    def clear_entries(lang: str):
        valid, error = validate_language(lang)
        if not valid:
            return jsonify({'error': error}), 400
        deleted = _translator().dictionary.clear(lang)
        return jsonify({'language': lang, 'deleted': deleted})

    @bp.route('/<lang>/lookup', methods=['GET'])
    def lookup(lang: str):
        """Longest stored match for ``?text=``, without calling the translator."""
        valid, error = validate_language(lang)
        if not valid:
            return jsonify({'error': error}), 400

        text = request.args.get('text', '')
        if not text.split():
            return jsonify({'error': 'text is required'}), 400

        match = _translator().lookup(text, lang)
        if match is None:
            return jsonify({'match': None})
        return jsonify({'match': {'length': match.length, 'replacement': match.replacement}})

    return bp


def create_health_blueprint() -> Blueprint:
    """Create health check routes blueprint."""
    bp = Blueprint('health', __name__, url_prefix='/api')

    @bp.route('/health', methods=['GET'])
    def health_check():
        translator = _translator()
        translator_ok = translator.translator.client.is_healthy()
        try:
            translator.dictionary.languages()
            dictionary_ok = True
        except sqlite3.Error:
            dictionary_ok = False

        status = HealthStatus(
            status='healthy' if translator_ok and dictionary_ok else 'degraded',
            translator_connected=translator_ok,
            dictionary_connected=dictionary_ok,
            version=__version__
        )
        return jsonify(status.to_dict())

    @bp.route('/metrics', methods=['GET'])
    def get_metrics():
        """Cycle counters plus host metrics."""
        import psutil

        system_metrics = {
            'cpu_percent': psutil.cpu_percent(interval=None),
            'memory_percent': psutil.virtual_memory().percent,
            'process_rss_mb': round(psutil.Process().memory_info().rss / (1024 * 1024), 1),
        }

        return jsonify({
            'translation_metrics': _translator().metrics.to_dict(),
            'system_metrics': system_metrics
        })

    return bp


def create_models_blueprint() -> Blueprint:
    """Create models routes blueprint."""
    bp = Blueprint('models', __name__, url_prefix='/api')

    @bp.route('/models', methods=['GET'])
    def list_models():
        models = _translator().translator.client.list_models()
        return jsonify({'models': [m.to_dict() for m in models]})

    @bp.route('/models/current', methods=['GET'])
    def get_current_model():
        return jsonify({'model': _translator().translator.model})

    @bp.route('/languages', methods=['GET'])
    def list_languages():
        """Target languages and programming languages with comment support."""
        return jsonify({
            'languages': SUPPORTED_LANGUAGES,
            'comment_languages': supported_comment_languages()
        })

    return bp


def create_logs_blueprint() -> Blueprint:
    """Create logs routes blueprint."""
    bp = Blueprint('logs', __name__)

    @bp.route('/logs', methods=['GET'])
    def get_logs():
        since_id = request.args.get('since', 0, type=int)
        if since_id > 0:
            logs = log_buffer.get_since(since_id)
        else:
            logs = log_buffer.get_all()
        return jsonify({'logs': logs})

    @bp.route('/logs/clear', methods=['POST'])
    def clear_logs():
        log_buffer.clear()
        return jsonify({'message': 'Logs cleared'})

    return bp
