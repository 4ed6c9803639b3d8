"""
History routes blueprint.

Mirrors `lektor history`:
- GET /api/history              - Newest-first page (limit, before, language)
- GET /api/history/<id>         - One saved entry
- DELETE /api/history/<id>      - Delete an entry
- POST /api/history/<id>/load   - Make a saved entry the current result
"""

from flask import Blueprint, current_app, jsonify, request

from infra.storage import HistoryWriteError
from tutor.history import LANGUAGE_FILTERS, parse_entries, parse_entry
from web.app import get_state
from web.data.view_data import entry_summary, view_data

history_bp = Blueprint('history', __name__)


@history_bp.route('/api/history')
def history_list():
    state = get_state(current_app)

    try:
        limit = int(request.args.get('limit', state.page_size))
    except ValueError:
        return jsonify({'error': {'kind': 'bad_request', 'message': 'limit must be an integer'}}), 400

    language = request.args.get('language', 'all')
    if language not in LANGUAGE_FILTERS:
        return jsonify({'error': {'kind': 'bad_request', 'message': f'language must be one of {list(LANGUAGE_FILTERS)}'}}), 400

    page = state.history.query(limit, before=request.args.get('before'), language=language)
    return jsonify({
        'entries': [entry_summary(e) for e in parse_entries(page.entries, state.logger)],
        'has_more': page.has_more,
        'cursor': page.cursor,
    })


@history_bp.route('/api/history/<entry_id>')
def history_get(entry_id: str):
    state = get_state(current_app)
    try:
        entry = parse_entry(state.history.get(entry_id))
    except KeyError:
        return jsonify({'error': {'kind': 'not_found', 'message': f'No entry {entry_id}'}}), 404
    except ValueError as e:
        return jsonify({'error': {'kind': 'malformed_entry', 'message': str(e)}}), 422
    return jsonify(entry.model_dump(mode='json', by_alias=True))


@history_bp.route('/api/history/<entry_id>', methods=['DELETE'])
def history_delete(entry_id: str):
    state = get_state(current_app)
    try:
        deleted = state.history.delete(entry_id)
    except HistoryWriteError as e:
        return jsonify({'error': {'kind': 'history_write_failed', 'message': str(e)}}), 500

    if not deleted:
        return jsonify({'error': {'kind': 'not_found', 'message': f'No entry {entry_id}'}}), 404
    return jsonify({'deleted': entry_id})


@history_bp.route('/api/history/<entry_id>/load', methods=['POST'])
def history_load(entry_id: str):
    state = get_state(current_app)
    try:
        entry = parse_entry(state.history.get(entry_id))
    except KeyError:
        return jsonify({'error': {'kind': 'not_found', 'message': f'No entry {entry_id}'}}), 404
    except ValueError as e:
        return jsonify({'error': {'kind': 'malformed_entry', 'message': str(e)}}), 422

    view = state.session.load_history_item(entry)
    return jsonify({'view': view_data(view)})
