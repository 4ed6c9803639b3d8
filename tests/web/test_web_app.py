"""Tests for the Flask frontend (web/app.py and its blueprints)."""

import threading
import time

import pytest

from infra.llm import CredentialMissingError, LLMError
from tutor.annotations import COLLAPSED
from tutor.schemas import CorrectionEntry
from web.app import create_app, get_state
from web.data.view_data import view_data


@pytest.fixture
def app(session, history_store, tmp_path):
    app = create_app(session=session, history=history_store, page_size=15, storage_root=tmp_path)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def test_index_renders_empty_page(client):
    response = client.get('/')
    assert response.status_code == 200
    assert b'Lektor' in response.data


def test_correct_returns_diff_and_saves(client, fake_client, make_correction, history_store):
    fake_client.queue(make_correction())

    response = client.post('/api/correct', json={'text': 'I have went to the store yesterday.'})

    assert response.status_code == 200
    view = response.get_json()['view']
    assert view['mode'] == 'correction'
    assert view['corrected'] == 'I went to the store yesterday.'
    assert any(part['removed'] and 'have' in part['value'] for part in view['diff'])
    assert view['entry_id'] is not None
    assert history_store.get(view['entry_id'])['kind'] == 'correction'


def test_explain_returns_repaired_segments(client, fake_client, make_explanation, sentence):
    fake_client.queue(make_explanation())

    response = client.post('/api/explain', json={'text': sentence})

    assert response.status_code == 200
    [data] = response.get_json()['view']['sentences']
    assert ''.join(s['text'] for s in data['segments']) == sentence
    marked = [s['annotation'] for s in data['segments'] if s['annotation']]
    assert [(a['text'], a['start'], a['end']) for a in marked] == [('have went', 2, 11), ('store', 19, 24)]
    assert marked[0]['css_class'] == 'mark-grammar'
    assert data['expanded'] is None


def test_explanation_is_marked_up_on_index(client, fake_client, make_explanation, sentence):
    fake_client.queue(make_explanation())
    client.post('/api/explain', json={'text': sentence})

    page = client.get('/').get_data(as_text=True)

    assert 'data-identity="0"' in page
    assert 'data-identity="1"' in page


@pytest.mark.parametrize('body', [{}, {'text': ''}, {'text': '   '}, {'text': 42}])
def test_submit_rejects_blank_text(client, fake_client, body):
    response = client.post('/api/correct', json=body)
    assert response.status_code == 400
    assert response.get_json()['error']['kind'] == 'bad_request'
    assert fake_client.calls == []


def test_missing_credentials_is_401(client, fake_client):
    fake_client.queue(CredentialMissingError())

    response = client.post('/api/correct', json={'text': 'Hallo'})

    assert response.status_code == 401
    assert response.get_json()['error']['kind'] == 'credential_missing'


def test_processing_failure_is_502_and_dismissable(client, fake_client, app):
    fake_client.queue(LLMError("upstream exploded"))

    response = client.post('/api/explain', json={'text': 'Hallo'})
    assert response.status_code == 502
    assert response.get_json()['error']['kind'] == 'processing_failed'

    dismissed = client.post('/api/dismiss').get_json()
    assert dismissed['error'] is None
    assert get_state(app).session.error is None


def test_unusable_model_output_is_502(client, fake_client):
    fake_client.queue("this is not json")
    response = client.post('/api/correct', json={'text': 'Hallo'})
    assert response.status_code == 502


def test_second_submit_while_busy_is_409(client, app, fake_client, make_correction, gate):
    fake_client.gate = gate
    fake_client.queue(make_correction())
    session = get_state(app).session

    worker = threading.Thread(target=session.submit, args=('I have went.', 'correction'))
    worker.start()
    deadline = time.time() + 5
    while not session.busy and time.time() < deadline:
        time.sleep(0.01)

    response = client.post('/api/correct', json={'text': 'Another text.'})
    gate.set()
    worker.join(timeout=5)

    assert response.status_code == 409
    assert len(fake_client.calls) == 1


def test_select_toggles_expansion(client, fake_client, make_explanation, sentence):
    fake_client.queue(make_explanation())
    client.post('/api/explain', json={'text': sentence})

    first = client.post('/api/select', json={'sentence': 0, 'identity': 1}).get_json()
    again = client.post('/api/select', json={'sentence': 0, 'identity': 1}).get_json()

    assert first['sentence']['expanded'] == 1
    assert again['sentence']['expanded'] is None


@pytest.mark.parametrize("identity", [99, 1])
def test_select_rejects_identity_without_a_span(client, app, fake_client, overlapping_explanation, sentence, identity):
    fake_client.queue(overlapping_explanation)
    client.post('/api/explain', json={'text': sentence})

    response = client.post('/api/select', json={'sentence': 0, 'identity': identity})

    assert response.status_code == 404
    assert get_state(app).session.current.sentences[0].selection == COLLAPSED


def test_select_without_explanation_is_400(client):
    response = client.post('/api/select', json={'sentence': 0, 'identity': 0})
    assert response.status_code == 400


def test_chat_about_current_result(client, fake_client, make_correction):
    fake_client.queue(make_correction())
    fake_client.queue("Because 'yesterday' needs the simple past.")
    client.post('/api/correct', json={'text': 'I have went to the store yesterday.'})

    response = client.post('/api/chat', json={'message': 'Why not present perfect?'})

    assert response.status_code == 200
    data = response.get_json()
    assert data['reply'] == {'role': 'model', 'content': "Because 'yesterday' needs the simple past."}
    assert [m['role'] for m in data['chat']] == ['user', 'model']


def test_chat_with_nothing_shown_is_400(client):
    response = client.post('/api/chat', json={'message': 'Hello?'})
    assert response.status_code == 400


def test_clear_drops_result_and_chat(client, fake_client, make_correction):
    fake_client.queue(make_correction())
    client.post('/api/correct', json={'text': 'I have went.'})

    data = client.post('/api/clear').get_json()

    assert data['view'] is None
    assert data['chat'] == []


def test_history_list_and_filter(client, fake_client, make_correction):
    fake_client.queue(make_correction(language="en"))
    fake_client.queue(make_correction(corrected="Ich bin gegangen.", language="de"))
    client.post('/api/correct', json={'text': 'I have went.'})
    client.post('/api/correct', json={'text': 'Ich habe gegangen.'})

    everything = client.get('/api/history').get_json()
    german = client.get('/api/history?language=de').get_json()

    assert [e['original'] for e in everything['entries']] == ['Ich habe gegangen.', 'I have went.']
    assert everything['has_more'] is False
    assert [e['language'] for e in german['entries']] == ['de']


@pytest.mark.parametrize('query', ['limit=abc', 'language=fr'])
def test_history_list_rejects_bad_arguments(client, query):
    assert client.get(f'/api/history?{query}').status_code == 400


def test_history_get_and_delete(client, fake_client, make_correction):
    fake_client.queue(make_correction())
    entry_id = client.post('/api/correct', json={'text': 'I have went.'}).get_json()['view']['entry_id']

    assert client.get(f'/api/history/{entry_id}').get_json()['corrected'] == 'I went to the store yesterday.'
    assert client.delete(f'/api/history/{entry_id}').get_json() == {'deleted': entry_id}
    assert client.get(f'/api/history/{entry_id}').status_code == 404
    assert client.delete(f'/api/history/{entry_id}').status_code == 404


def test_history_load_replaces_current_view(client, fake_client, make_explanation, make_correction, sentence):
    fake_client.queue(make_explanation())
    fake_client.queue(make_correction())
    explained = client.post('/api/explain', json={'text': sentence}).get_json()['view']['entry_id']
    client.post('/api/correct', json={'text': 'I have went.'})

    response = client.post(f'/api/history/{explained}/load')

    assert response.status_code == 200
    view = response.get_json()['view']
    assert view['mode'] == 'explanation'
    assert view['entry_id'] == explained


def test_history_load_missing_is_404(client):
    assert client.post('/api/history/0000000000000-deadbeef/load').status_code == 404


@pytest.fixture
def broken_record(history_store):
    good = history_store.append(CorrectionEntry(original="I has a cat.", corrected="I have a cat.", language="en"))
    history_store.append({"kind": "correction", "original": "Bonjour", "language": "fr"})
    return good


def test_history_list_skips_malformed_records(client, broken_record):
    response = client.get('/api/history')

    assert response.status_code == 200
    assert [e['id'] for e in response.get_json()['entries']] == [broken_record['id']]


def test_index_survives_malformed_records(client, broken_record):
    response = client.get('/')

    assert response.status_code == 200
    assert 'I has a cat.' in response.get_data(as_text=True)


def test_malformed_record_cannot_be_loaded(client, broken_record, history_store):
    [bad] = [r for r in history_store.query(20).entries if r['id'] != broken_record['id']]
    assert client.post(f"/api/history/{bad['id']}/load").status_code == 422


def test_view_data_rejects_unknown_views():
    with pytest.raises(TypeError):
        view_data(object())
