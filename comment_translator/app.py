"""
Comment Translator Application
==============================
Flask application factory and main entry point.
"""
from flask import Flask
from flask_cors import CORS

from comment_translator.config import config
from comment_translator.api.routes import (
    create_annotate_blueprint,
    create_dictionary_blueprint,
    create_health_blueprint,
    create_models_blueprint,
    create_logs_blueprint
)
from comment_translator.api.middleware import add_rate_limit_headers
from comment_translator.services.orchestrator import CommentTranslator
from comment_translator.utils.logging import get_logger, debug_print


def create_app(testing: bool = False, comment_translator: CommentTranslator = None) -> Flask:
    """
    Application factory for Flask app.

    Args:
        testing: If True, configure for testing
        comment_translator: Orchestrator to serve requests with; the
            process-wide instance is used when omitted

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)

    app.config.update(
        SECRET_KEY=config.server.secret_key,
        MAX_CONTENT_LENGTH=config.server.max_content_mb * 1024 * 1024,
        TESTING=testing,
        COMMENT_TRANSLATOR=comment_translator
    )

    cors_origins = ['*'] if testing else config.server.cors_origins
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    app.register_blueprint(create_annotate_blueprint())
    app.register_blueprint(create_dictionary_blueprint())
    app.register_blueprint(create_health_blueprint())
    app.register_blueprint(create_models_blueprint())
    app.register_blueprint(create_logs_blueprint())

    app.after_request(add_rate_limit_headers)

    @app.errorhandler(400)
    def bad_request(e):
        return {'error': 'Bad request', 'details': str(e)}, 400

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Resource not found'}, 404

    @app.errorhandler(413)
    def too_large(e):
        return {'error': f'Document too large. Maximum size is {config.server.max_content_mb}MB'}, 413

    @app.errorhandler(429)
    def rate_limited(e):
        return {'error': 'Rate limit exceeded'}, 429

    @app.errorhandler(500)
    def internal_error(e):
        get_logger().api_logger.error(f"Internal error: {e}")
        return {'error': 'Internal server error'}, 500

    get_logger().api_logger.info(f"Comment Translator started on {config.server.host}:{config.server.port}")
    debug_print("Application initialized", 'INFO', 'APP')

    return app


def run_server():
    """Run the Flask development server."""
    app = create_app()

    print(f"""
============================================================
  Comment Translator API
  URL:    http://{config.server.host}:{config.server.port}
  Model:  {config.translator.model}
  Target: {config.translation.default_target_language}
============================================================
    """)

    app.run(
        host=config.server.host,
        port=config.server.port,
        debug=config.server.debug,
        threaded=True
    )


if __name__ == '__main__':
    run_server()
