"""Oracle proxy tests (Flask test client, fake upstream)."""

import pytest
import requests

from mystic_quest.config import Settings
from mystic_quest.lore import SYSTEM_PROMPT, UNCLEAR_RESPONSE, RESTING_RESPONSE
from mystic_quest.server import create_app

from helpers import FakeHttp, FakeResponse


def completion(text):
    return {'choices': [{'message': {'role': 'assistant', 'content': text}}]}


@pytest.fixture
def settings():
    return Settings(
        together_api_key='test-key',
        together_url='https://llm.test/v1/chat/completions',
        oracle_model='oracle-model',
        chat_model='chat-model',
        oracle_timeout=5.0,
    )


@pytest.fixture
def upstream():
    return FakeHttp(FakeResponse(200, completion('Seek the eastern gate.')))


@pytest.fixture
def client(settings, upstream):
    app = create_app(settings, http=upstream)
    app.config['TESTING'] = True
    return app.test_client()


class TestForwarding:

    def test_oracle_route(self, client, upstream):
        resp = client.post('/api/ai-oracle', json={'prompt': 'Where now?'})

        assert resp.status_code == 200
        assert resp.get_json() == {'response': 'Seek the eastern gate.'}

        url, kwargs = upstream.calls[0]
        assert url == 'https://llm.test/v1/chat/completions'
        assert kwargs['headers']['Authorization'] == 'Bearer test-key'
        assert kwargs['timeout'] == 5.0
        body = kwargs['json']
        assert body['model'] == 'oracle-model'
        assert body['max_tokens'] == 100
        assert body['temperature'] == 0.7
        assert body['messages'] == [
            {'role': 'system', 'content': SYSTEM_PROMPT},
            {'role': 'user', 'content': 'Where now?'},
        ]

    def test_chat_route_uses_chat_model(self, client, upstream):
        resp = client.post('/api/ai-chat', json={'prompt': 'Hello'})
        assert resp.status_code == 200
        assert upstream.calls[0][1]['json']['model'] == 'chat-model'

    def test_context_appended(self, client, upstream):
        client.post('/api/ai-oracle', json={
            'prompt': 'Help?',
            'context': 'Player level: 3',
            'scene': 'temple',
            'playerLevel': 3,
        })
        user_message = upstream.calls[0][1]['json']['messages'][1]['content']
        assert user_message.startswith('Help?')
        assert 'Player level: 3' in user_message

    def test_empty_completion(self, settings):
        app = create_app(settings, http=FakeHttp(FakeResponse(200, completion(''))))
        resp = app.test_client().post('/api/ai-oracle', json={'prompt': 'Hi'})
        assert resp.get_json() == {'response': UNCLEAR_RESPONSE}

    def test_non_text_completion(self, settings):
        app = create_app(settings, http=FakeHttp(FakeResponse(200, completion(42))))
        resp = app.test_client().post('/api/ai-oracle', json={'prompt': 'Hi'})
        assert resp.status_code == 200
        assert resp.get_json() == {'response': UNCLEAR_RESPONSE}


class TestBadRequests:

    @pytest.mark.parametrize('body', [{}, {'prompt': ''}, {'prompt': '   '}, {'prompt': 7}])
    def test_prompt_required(self, client, upstream, body):
        resp = client.post('/api/ai-oracle', json=body)
        assert resp.status_code == 400
        assert resp.get_json() == {'error': 'Prompt is required'}
        assert upstream.calls == []

    def test_non_json_body(self, client):
        resp = client.post('/api/ai-chat', data='prompt=hi',
                           content_type='application/x-www-form-urlencoded')
        assert resp.status_code == 400

    def test_wrong_method(self, client):
        assert client.get('/api/ai-oracle').status_code == 405


class TestUpstreamFailure:

    @pytest.mark.parametrize('upstream_http', [
        FakeHttp(FakeResponse(503, {'error': 'overloaded'})),
        FakeHttp(error=requests.ConnectionError('down')),
        FakeHttp(FakeResponse(200, bad_json=True)),
        FakeHttp(FakeResponse(200, {'choices': 'nope'})),
        FakeHttp(FakeResponse(200, {'choices': 5})),
        FakeHttp(FakeResponse(200, {'choices': [5]})),
    ])
    def test_fallback_body(self, settings, upstream_http):
        app = create_app(settings, http=upstream_http)
        resp = app.test_client().post('/api/ai-oracle', json={'prompt': 'Hi'})

        assert resp.status_code == 500
        assert resp.get_json() == {
            'error': 'AI service temporarily unavailable',
            'response': RESTING_RESPONSE,
        }


def test_health(client):
    assert client.get('/health').get_json() == {'status': 'ok'}
