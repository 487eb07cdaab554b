"""
Integration Tests for Flask API
================================
Endpoints exercised through the Flask test client with a temporary
dictionary and a mocked chat endpoint.
"""
import pytest
import sys
import os
import json
from unittest.mock import Mock, patch

# Setup test environment
os.environ.setdefault('VERBOSE_DEBUG', 'false')

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from comment_translator.config import config
from comment_translator.database.connection import Database
from comment_translator.database.repositories import DictionaryRepository
from comment_translator.models.schemas import ModelInfo
from comment_translator.services.batch_translator import BatchTranslator
from comment_translator.services.llm_client import ChatResponse
from comment_translator.services.orchestrator import CommentTranslator
from comment_translator.services.sampler import PhraseSampler


class FirstWord:
    """Sampler rng that always starts at the first word."""

    def randint(self, a, b):
        return a


@pytest.fixture
def chat_client():
    client = Mock()
    client.is_healthy.return_value = True
    client.list_models.return_value = [ModelInfo(name='gpt-4o-mini', owned_by='openai')]
    return client


@pytest.fixture
def translator(tmp_path, chat_client):
    db = Database(tmp_path / 'api.db')
    ct = CommentTranslator(
        dictionary=DictionaryRepository(db),
        translator=BatchTranslator(client=chat_client, model='gpt-4o-mini', max_retries=1, retry_delay=0),
        sampler=PhraseSampler(FirstWord()),
        phrase_word_count=2,
        source_lang='en'
    )
    yield ct
    db.close()


@pytest.fixture
def client(translator):
    """Create test client for Flask app."""
    from comment_translator.app import create_app

    app = create_app(testing=True, comment_translator=translator)

    with app.test_client() as client:
        yield client


class TestAnnotateEndpoint:
    """Test the annotate endpoint."""

    def test_annotate_translates_and_caches(self, client, chat_client):
        chat_client.chat.return_value = ChatResponse(success=True, text='["hola mundo"]')

        response = client.post('/api/annotate', json={
            'text': '// hello world\nconst x = 1;',
            'language_id': 'typescript',
            'target_lang': 'es'
        })

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['resolved'] == 1
        assert data['decorations'][0]['label'] == '[hello world] hola mundo'
        assert data['decorations'][0]['range'] == {'start': 3, 'end': 14}

        second = json.loads(client.post('/api/annotate', json={
            'text': '// hello world',
            'language_id': 'typescript',
            'target_lang': 'es'
        }).data)
        assert second['cache_hits'] == 1
        assert chat_client.chat.call_count == 1

    def test_annotate_uses_request_source_language(self, client, chat_client):
        chat_client.chat.return_value = ChatResponse(success=True, text='["chat"]')

        response = client.post('/api/annotate', json={
            'text': '// hola gato',
            'language_id': 'typescript',
            'target_lang': 'fr',
            'source_lang': 'es'
        })

        assert response.status_code == 200
        messages = chat_client.chat.call_args.args[0]
        assert messages[1]['content'].startswith("Translate the following from es to fr:")

    def test_annotate_discarded_batch(self, client, chat_client):
        chat_client.chat.return_value = ChatResponse(success=True, text='["uno", "dos"]')

        data = json.loads(client.post('/api/annotate', json={
            'text': '// hello world',
            'language_id': 'typescript',
            'target_lang': 'es'
        }).data)

        assert data['discarded'] == 1
        assert data['decorations'] == []

    def test_annotate_unsupported_language(self, client):
        response = client.post('/api/annotate', json={
            'text': '-- comment',
            'language_id': 'sql',
            'target_lang': 'es'
        })
        assert response.status_code == 422
        assert 'No comment syntax available' in json.loads(response.data)['warning']

    def test_annotate_requires_json(self, client):
        response = client.post('/api/annotate', data='nope', content_type='text/plain')
        assert response.status_code == 400

    def test_annotate_validation(self, client):
        response = client.post('/api/annotate', json={'text': '// x', 'target_lang': 'xx'})
        assert response.status_code == 400
        error = json.loads(response.data)['error']
        assert 'language_id is required' in error
        assert 'Unsupported target language' in error

    def test_rate_limit_headers(self, client, chat_client):
        chat_client.chat.return_value = ChatResponse(success=True, text='["x"]')
        response = client.post('/api/annotate', json={'text': '', 'language_id': 'go'})
        assert 'X-RateLimit-Limit' in response.headers


class TestDictionaryEndpoints:
    """Test dictionary management endpoints."""

    def test_merge_then_get(self, client):
        response = client.post('/api/dictionary/es', json={
            'entries': {'one  cat': ' un gato ', 'dog': 'perro'}
        })
        assert response.status_code == 200
        assert json.loads(response.data)['merged'] == 2

        data = json.loads(client.get('/api/dictionary/es').data)
        assert data['entries'] == {'one cat': 'un gato', 'dog': 'perro'}
        assert data['count'] == 2

    def test_overview(self, client):
        client.post('/api/dictionary/fr', json={'entries': {'cat': 'chat'}})
        data = json.loads(client.get('/api/dictionary').data)
        assert data['languages'] == ['fr']
        assert data['stats']['total_entries'] == 1

    def test_lookup(self, client):
        client.post('/api/dictionary/es', json={'entries': {
            'one cat': 'un gato', 'one cat and two': 'un gato y dos'
        }})

        data = json.loads(client.get('/api/dictionary/es/lookup', query_string={'text': 'one cat and two dogs'}).data)
        assert data['match'] == {'length': 4, 'replacement': 'un gato y dos'}

        data = json.loads(client.get('/api/dictionary/es/lookup', query_string={'text': 'nothing here'}).data)
        assert data['match'] is None

    def test_lookup_requires_text(self, client):
        assert client.get('/api/dictionary/es/lookup').status_code == 400

    def test_delete(self, client):
        client.post('/api/dictionary/es', json={'entries': {'cat': 'gato'}})
        data = json.loads(client.delete('/api/dictionary/es').data)
        assert data['deleted'] == 1

    def test_invalid_language(self, client):
        assert client.get('/api/dictionary/xx').status_code == 400

    def test_invalid_entries(self, client):
        response = client.post('/api/dictionary/es', json={'entries': {'cat': ''}})
        assert response.status_code == 400

    def test_api_key_enforced(self, client):
        with patch.object(config.security, 'api_key', 'secret'):
            response = client.post('/api/dictionary/es', json={'entries': {'cat': 'gato'}})
            assert response.status_code == 401

            response = client.post('/api/dictionary/es', json={'entries': {'cat': 'gato'}},
                                   headers={'X-API-Key': 'wrong'})
            assert response.status_code == 403

            response = client.delete('/api/dictionary/es', headers={'X-API-Key': 'secret'})
            assert response.status_code == 200


class TestHealthEndpoint:
    """Test health and metrics endpoints."""

    def test_health_healthy(self, client):
        data = json.loads(client.get('/api/health').data)
        assert data['status'] == 'healthy'
        assert data['translator_connected'] is True
        assert data['dictionary_connected'] is True

    def test_health_degraded(self, client, chat_client):
        chat_client.is_healthy.return_value = False
        data = json.loads(client.get('/api/health').data)
        assert data['status'] == 'degraded'

    def test_metrics(self, client):
        data = json.loads(client.get('/api/metrics').data)
        assert data['translation_metrics']['cycles'] == 0
        assert 'cpu_percent' in data['system_metrics']


class TestModelsEndpoint:
    """Test models and languages listing."""

    def test_models(self, client):
        data = json.loads(client.get('/api/models').data)
        assert data['models'] == [{'name': 'gpt-4o-mini', 'owned_by': 'openai'}]

    def test_current_model(self, client):
        data = json.loads(client.get('/api/models/current').data)
        assert data['model'] == 'gpt-4o-mini'

    def test_languages(self, client):
        data = json.loads(client.get('/api/languages').data)
        assert 'es' in data['languages']
        assert 'typescript' in data['comment_languages']


class TestLogsEndpoint:
    """Test log buffer endpoints."""

    def test_logs(self, client):
        data = json.loads(client.get('/logs').data)
        assert 'logs' in data

    def test_clear_logs(self, client):
        assert client.post('/logs/clear').status_code == 200
        assert json.loads(client.get('/logs').data)['logs'] == []


class TestRateLimiter:
    """Test the sliding window."""

    def test_window_fills_then_frees(self):
        from comment_translator.api.middleware import RateLimiter

        limiter = RateLimiter(requests_per_minute=2)
        assert limiter.check('c', now=0).remaining == 1
        assert limiter.check('c', now=10).remaining == 0

        blocked = limiter.check('c', now=20)
        assert not blocked.allowed
        assert blocked.reset == 41

        assert limiter.check('other', now=20).allowed
        assert limiter.check('c', now=61).allowed


class TestErrorHandlers:
    """Test JSON error responses."""

    def test_not_found(self, client):
        response = client.get('/api/does-not-exist')
        assert response.status_code == 404
        assert json.loads(response.data)['error'] == 'Resource not found'


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
