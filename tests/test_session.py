"""Session state tests: blob shape, merge rules, expiry and store failures."""

import pytest
from django.contrib.sessions.backends.signed_cookies import SessionStore
from django.db import DatabaseError
from pydantic import ValidationError

from apps.workflow.exceptions import PersistenceUnavailable
from apps.workflow.session import SESSION_KEY, SessionState, SessionStoreAdapter, WizardSession

from .conftest import START, TTL


class TestStartAndRead:

    def test_start_creates_step_one_session(self, state, store):
        assert state.start()
        session = state.read()
        assert session.current_step == 1
        assert session.completed_steps == set()
        assert session.form_data == {}
        assert session.signature_data == {}
        assert session.wizard_version == '1.0'
        assert session.started_at == START
        assert session.expires_at == START + TTL
        assert store.blob['completed_steps'] == []

    def test_start_replaces_existing_session(self, state, clock):
        state.start()
        state.update({'current_step': 3, 'completed_steps': {1, 2}})
        clock.advance(60)

        assert state.start()
        session = state.read()
        assert session.current_step == 1
        assert session.completed_steps == set()
        assert session.started_at == START + 60

    def test_read_without_session_returns_none(self, state):
        assert state.read() is None


class TestUpdate:

    def test_update_merges_mappings_and_overwrites_scalars(self, state):
        state.start()
        state.update({'form_data': {'field_1': 'a', 'field_2': 'b'}, 'current_step': 2})
        state.update({'form_data': {'field_2': 'c', 'field_3': 'd'}, 'current_step': 3})

        session = state.read()
        assert session.form_data == {'field_1': 'a', 'field_2': 'c', 'field_3': 'd'}
        assert session.current_step == 3

    def test_completed_steps_never_shrink(self, state):
        state.start()
        state.update({'completed_steps': {1, 2}})
        state.update({'completed_steps': {3}})
        state.update({'completed_steps': set()})

        assert state.read().completed_steps == {1, 2, 3}

    def test_update_refreshes_expiry(self, state, clock):
        state.start()
        clock.advance(TTL - 10)
        state.update({'form_data': {'field_1': 'x'}})
        clock.advance(TTL - 10)

        session = state.read()
        assert session is not None
        assert session.expires_at == START + (TTL - 10) + TTL

    def test_update_without_session_writes_nothing(self, state, store):
        assert state.update({'current_step': 2, 'completed_steps': {1}}) is False
        assert store.blob is None
        assert state.read() is None

    def test_update_after_expiry_writes_nothing(self, state, store, clock):
        state.start()
        clock.advance(TTL + 1)
        assert state.update({'form_data': {'field_1': 'x'}}) is False
        assert store.blob is None

    def test_unknown_field_is_rejected(self, state):
        state.start()
        with pytest.raises(ValueError):
            state.update({'shipping_method': 'express'})

    def test_out_of_range_step_is_not_saved(self, state):
        state.start()
        with pytest.raises(ValueError):
            state.update({'current_step': 5})
        assert state.read().current_step == 1


class TestExpiry:

    def test_session_valid_until_expires_at(self, state, clock):
        state.start()
        clock.advance(TTL)
        assert state.read() is not None

    def test_expired_session_reads_as_absent_and_is_cleared(self, state, store, clock):
        state.start()
        clock.advance(TTL + 1)

        assert state.read() is None
        assert store.blob is None


class TestMalformedBlob:

    @pytest.mark.parametrize('blob', [
        'not-a-mapping',
        {'current_step': 1},
        {'started_at': START, 'expires_at': START + TTL, 'current_step': 7},
        {'started_at': START, 'expires_at': START + TTL, 'current_step': '2'},
        {'started_at': START, 'expires_at': START + TTL, 'completed_steps': [1, 9]},
        {'started_at': START, 'expires_at': START + TTL, 'completed_steps': 'all'},
        {'started_at': START, 'expires_at': START + TTL, 'form_data': ['x']},
        {'started_at': str(START), 'expires_at': START + TTL},
        {'started_at': START, 'expires_at': START + TTL, 'current_step': True},
        {'started_at': START, 'expires_at': START + TTL, 'wizard_version': 2},
    ])
    def test_malformed_blob_is_discarded(self, state, store, blob):
        store.blob = blob
        assert state.read() is None
        assert store.blob is None

    def test_wizard_session_blob_shape(self):
        session = WizardSession(started_at=START, expires_at=START + TTL, completed_steps={2, 1})
        blob = session.model_dump(mode='json')
        assert blob['completed_steps'] == [1, 2]
        assert blob['completed_at'] is None
        assert WizardSession.model_validate(blob) == session

    def test_assignments_are_validated(self):
        session = WizardSession(started_at=START, expires_at=START + TTL)
        with pytest.raises(ValidationError):
            session.current_step = 9
        with pytest.raises(ValidationError):
            session.completed_steps = {0}


class TestUnavailableStore:

    def test_operations_report_failure(self, state, store):
        store.available = False
        assert state.start() is False
        assert state.update({'current_step': 2}) is False
        assert state.clear() is False
        with pytest.raises(PersistenceUnavailable):
            state.read()

    def test_failed_read_raises_instead_of_reading_as_absent(self, state, store):
        state.start()
        store.fail_reads = True
        with pytest.raises(PersistenceUnavailable):
            state.read()

    def test_failed_read_never_overwrites_progress(self, state, store):
        state.start()
        state.update({'current_step': 3, 'completed_steps': {1, 2}, 'form_data': {'field_1': 'x'}})
        saved = dict(store.blob)

        store.fail_reads = True
        assert state.update({'current_step': 2}) is False
        assert store.blob == saved

        store.fail_reads = False
        session = state.read()
        assert session.completed_steps == {1, 2}
        assert session.form_data == {'field_1': 'x'}

    def test_failed_write_returns_false(self, state, store):
        state.start()
        store.fail_writes = True
        assert state.update({'current_step': 2}) is False
        assert state.read().current_step == 1


class BrokenSession(dict):
    session_key = 'broken'
    modified = False

    def get(self, key, default=None):
        raise DatabaseError('django_session is locked')


class TestSessionStoreAdapter:

    def test_reads_and_writes_under_wizard_key(self):
        session = SessionStore()
        adapter = SessionStoreAdapter(session)

        adapter.set({'current_step': 1})
        assert session[SESSION_KEY] == {'current_step': 1}
        assert session.modified
        assert adapter.get() == {'current_step': 1}

        adapter.delete()
        assert adapter.get() is None

    def test_missing_session_is_unavailable(self):
        adapter = SessionStoreAdapter(None)
        assert not adapter.is_available()
        assert adapter.session_id == 'no-session'
        with pytest.raises(PersistenceUnavailable):
            adapter.get()

    def test_database_errors_become_persistence_unavailable(self):
        adapter = SessionStoreAdapter(BrokenSession())
        with pytest.raises(PersistenceUnavailable):
            adapter.get()

    def test_broken_backend_is_reported(self):
        state = SessionState(SessionStoreAdapter(BrokenSession()), ttl=TTL, wizard_version='1.0')
        with pytest.raises(PersistenceUnavailable):
            state.read()
        assert state.update({'current_step': 2}) is False
