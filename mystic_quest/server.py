"""
Oracle Proxy
=============
Flask service that forwards a player's prompt to a hosted chat-completion
API with a fixed system prompt and returns the text.

Both routes share one forwarding path; they differ only in model name.
"""

import logging
from typing import Optional

import requests
from flask import Flask, jsonify, request

from .config import Settings, configure_logging
from .lore import SYSTEM_PROMPT, UNCLEAR_RESPONSE, RESTING_RESPONSE

logger = logging.getLogger(__name__)

MAX_TOKENS = 100
TEMPERATURE = 0.7


class UpstreamError(Exception):
    """The chat-completion API could not produce an answer."""


def build_messages(prompt: str, context: Optional[str] = None) -> list:
    user_content = prompt if not context else f'{prompt}\n\nContext:\n{context.strip()}'
    return [
        {'role': 'system', 'content': SYSTEM_PROMPT},
        {'role': 'user', 'content': user_content},
    ]


def forward_prompt(http: requests.Session, settings: Settings, model: str,
                   prompt: str, context: Optional[str] = None) -> str:
    """POST to the chat-completion API and pull out the first choice's text."""
    try:
        resp = http.post(
            settings.together_url,
            headers={
                'Authorization': f'Bearer {settings.together_api_key}',
                'Content-Type': 'application/json',
            },
            json={
                'model': model,
                'messages': build_messages(prompt, context),
                'max_tokens': MAX_TOKENS,
                'temperature': TEMPERATURE,
            },
            timeout=settings.oracle_timeout,
        )
    except requests.RequestException as e:
        raise UpstreamError(f'API request failed: {e}') from e

    if not resp.ok:
        raise UpstreamError(f'API request failed: {resp.status_code}')

    try:
        data = resp.json()
        choices = data.get('choices') or []
        message = (choices[0].get('message') or {}) if choices else {}
        content = message.get('content')
    except (ValueError, AttributeError, TypeError, IndexError) as e:
        raise UpstreamError(f'Malformed API response: {e}') from e

    if not isinstance(content, str) or not content:
        return UNCLEAR_RESPONSE
    return content


def create_app(settings: Optional[Settings] = None,
               http: Optional[requests.Session] = None) -> Flask:
    """Application factory."""
    settings = settings or Settings.from_env()
    http = http or requests.Session()

    app = Flask(__name__)

    if not settings.together_api_key:
        logger.warning('TOGETHER_API_KEY is not set; Oracle requests will fail')

    def _answer(model: str):
        body = request.get_json(silent=True)
        prompt = body.get('prompt') if isinstance(body, dict) else None
        if not isinstance(prompt, str) or not prompt.strip():
            return jsonify({'error': 'Prompt is required'}), 400

        context = body.get('context')
        if not isinstance(context, str):
            context = None

        try:
            text = forward_prompt(http, settings, model, prompt, context)
        except UpstreamError:
            logger.exception('AI API Error')
            return jsonify({
                'error': 'AI service temporarily unavailable',
                'response': RESTING_RESPONSE,
            }), 500

        return jsonify({'response': text})

    @app.route('/api/ai-oracle', methods=['POST'])
    def ai_oracle():
        return _answer(settings.oracle_model)

    @app.route('/api/ai-chat', methods=['POST'])
    def ai_chat():
        return _answer(settings.chat_model)

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok'})

    return app


def main():
    """Run the Oracle proxy with Flask's built-in server."""
    settings = Settings.from_env()
    configure_logging(settings, to_file=False)
    app = create_app(settings)
    logger.info('Oracle proxy listening on %s:%d', settings.oracle_host, settings.oracle_port)
    app.run(host=settings.oracle_host, port=settings.oracle_port)


if __name__ == '__main__':
    main()
