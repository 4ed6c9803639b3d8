"""
Tutor routes blueprint.

Mirrors the CLI tutor commands:
- GET /                 - Page with the current result (like `lektor correct`)
- POST /api/correct     - Correct a text
- POST /api/explain     - Explain a text sentence by sentence
- POST /api/chat        - Follow-up question about the current result
- POST /api/select      - Toggle the expanded annotation of a sentence
- POST /api/clear       - Drop the current result
- POST /api/dismiss     - Dismiss the current error
"""

from flask import Blueprint, current_app, jsonify, render_template, request

from tutor.annotations import CATEGORY_STYLES
from tutor.history import LANGUAGE_FILTERS, parse_entries
from tutor.session import CORRECTION, EXPLANATION, SessionError
from web.app import get_state
from web.data.view_data import chat_data, entry_summary, error_data, view_data

tutor_bp = Blueprint('tutor', __name__)

ERROR_STATUS = {
    SessionError.CREDENTIAL_MISSING: 401,
    SessionError.PROCESSING_FAILED: 502,
}


def _json_body():
    return request.get_json(silent=True) or {}


def _session_response(result, status: int = 200):
    state = get_state(current_app)
    return jsonify({
        'result': result,
        'view': view_data(state.session.current),
        'chat': chat_data(state.session.chat),
        'error': error_data(state.session.error),
    }), status


def _error_response(error: SessionError):
    return jsonify({'error': error_data(error)}), ERROR_STATUS.get(error.kind, 500)


@tutor_bp.route('/')
def index():
    state = get_state(current_app)
    language = request.args.get('language', 'all')
    if language not in LANGUAGE_FILTERS:
        language = 'all'

    page = state.history.query(state.page_size, language=language)
    entries = parse_entries(page.entries, state.logger)

    return render_template(
        'index.html',
        view=view_data(state.session.current),
        chat=chat_data(state.session.chat),
        error=error_data(state.session.error),
        history=[entry_summary(e) for e in entries],
        has_more=page.has_more,
        cursor=page.cursor,
        language=language,
        languages=LANGUAGE_FILTERS,
        styles=CATEGORY_STYLES.values(),
    )


def _submit(mode: str):
    state = get_state(current_app)
    text = _json_body().get('text')
    if not isinstance(text, str) or not text.strip():
        return jsonify({'error': {'kind': 'bad_request', 'message': 'text must be a non-empty string'}}), 400

    if state.session.busy:
        return jsonify({'error': {'kind': 'busy', 'message': 'A request is already in progress'}}), 409

    view = state.session.submit(text, mode)
    if state.session.error is not None:
        return _error_response(state.session.error)
    if view is None:
        return jsonify({'error': {'kind': 'busy', 'message': 'The request was superseded'}}), 409

    return jsonify({'view': view_data(view)})


@tutor_bp.route('/api/correct', methods=['POST'])
def correct():
    return _submit(CORRECTION)


@tutor_bp.route('/api/explain', methods=['POST'])
def explain():
    return _submit(EXPLANATION)


@tutor_bp.route('/api/chat', methods=['POST'])
def chat():
    state = get_state(current_app)
    message = _json_body().get('message')
    if not isinstance(message, str) or not message.strip():
        return jsonify({'error': {'kind': 'bad_request', 'message': 'message must be a non-empty string'}}), 400
    if state.session.current is None:
        return jsonify({'error': {'kind': 'bad_request', 'message': 'Nothing to chat about yet'}}), 400
    if state.session.busy:
        return jsonify({'error': {'kind': 'busy', 'message': 'A request is already in progress'}}), 409

    reply = state.session.send_chat(message)
    if state.session.error is not None:
        return _error_response(state.session.error)
    if reply is None:
        return jsonify({'error': {'kind': 'busy', 'message': 'The chat was superseded'}}), 409

    return jsonify({'reply': {'role': reply.role, 'content': reply.content}, 'chat': chat_data(state.session.chat)})


@tutor_bp.route('/api/select', methods=['POST'])
def select():
    state = get_state(current_app)
    body = _json_body()
    sentence = body.get('sentence')
    identity = body.get('identity')
    if not isinstance(sentence, int) or not isinstance(identity, int):
        return jsonify({'error': {'kind': 'bad_request', 'message': 'sentence and identity must be integers'}}), 400

    view = state.session.current
    if view is None or view.mode != EXPLANATION or not 0 <= sentence < len(view.sentences):
        return jsonify({'error': {'kind': 'bad_request', 'message': 'No such sentence'}}), 400

    try:
        state.session.select(sentence, identity)
    except ValueError as e:
        return jsonify({'error': {'kind': 'not_found', 'message': str(e)}}), 404
    return jsonify({'sentence': view_data(view)['sentences'][sentence]})


@tutor_bp.route('/api/clear', methods=['POST'])
def clear():
    get_state(current_app).session.clear()
    return _session_response(None)


@tutor_bp.route('/api/dismiss', methods=['POST'])
def dismiss():
    get_state(current_app).session.dismiss_error()
    return _session_response(None)
