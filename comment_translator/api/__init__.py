"""
Comment Translator - API Module
"""
from comment_translator.api.routes import (
    create_annotate_blueprint,
    create_dictionary_blueprint,
    create_health_blueprint,
    create_models_blueprint,
    create_logs_blueprint
)

__all__ = [
    "create_annotate_blueprint",
    "create_dictionary_blueprint",
    "create_health_blueprint",
    "create_models_blueprint",
    "create_logs_blueprint"
]
