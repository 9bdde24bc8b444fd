"""
Unit tests for session management.

Tests Session, MemorySession and SQLiteSession.
"""
import pytest

from gaiapy.core.session import (
    SessionStorage,
    Session,
    SQLiteSession,
    MemorySession,
    GAIA_HUB_CONFIG_KEY,
)


@pytest.fixture
def hub_session():
    return Session(
        read_url_prefix='https://gaia.example.com/hub/',
        storage_address='1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAMH',
        auth_token='v1:header.payload.signature',
        hub_base_url='https://hub.example.com'
    )


class TestSession:
    """Tests for the Session model."""

    def test_to_dict_uses_wire_keys(self, hub_session):
        assert hub_session.to_dict() == {
            'url_prefix': 'https://gaia.example.com/hub/',
            'address': '1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAMH',
            'token': 'v1:header.payload.signature',
            'server': 'https://hub.example.com',
        }

    def test_json_roundtrip(self, hub_session):
        assert Session.from_json(hub_session.to_json()) == hub_session

    def test_from_dict_missing_fields(self):
        session = Session.from_dict({'address': 'abc'})

        assert session.storage_address == 'abc'
        assert session.auth_token is None

    def test_is_valid(self, hub_session):
        assert hub_session.is_valid() is True
        assert Session().is_valid() is False
        assert Session.from_dict({**hub_session.to_dict(), 'token': ''}).is_valid() is False

    def test_immutable(self, hub_session):
        with pytest.raises(AttributeError):
            hub_session.auth_token = 'other'

    def test_repr_hides_token(self, hub_session):
        assert 'signature' not in repr(hub_session)


class TestMemorySession:
    """Tests for MemorySession storage."""

    def test_implements_protocol(self):
        assert isinstance(MemorySession(), SessionStorage)

    def test_save_load_delete(self, hub_session):
        storage = MemorySession()
        assert storage.exists() is False

        storage.save(hub_session)
        assert storage.exists() is True
        assert storage.load() == hub_session

        storage.delete()
        assert storage.load() is None


class TestSQLiteSession:
    """Tests for SQLiteSession storage."""

    def test_implements_protocol(self, tmp_path):
        with SQLiteSession('app', base_path=tmp_path) as storage:
            assert isinstance(storage, SessionStorage)

    def test_creates_session_file(self, tmp_path):
        storage = SQLiteSession('app', base_path=tmp_path)

        assert storage.path == tmp_path / 'app.session'
        assert storage.path.exists()
        assert storage.config_key == GAIA_HUB_CONFIG_KEY
        storage.close()

    def test_save_and_load(self, tmp_path, hub_session):
        storage = SQLiteSession('app', base_path=tmp_path)
        storage.save(hub_session)

        assert storage.exists() is True
        assert storage.load() == hub_session
        storage.close()

    def test_persists_across_instances(self, tmp_path, hub_session):
        first = SQLiteSession('app', base_path=tmp_path)
        first.save(hub_session)
        first.close()

        second = SQLiteSession('app', base_path=tmp_path)
        assert second.load() == hub_session
        second.close()

    def test_save_replaces_record(self, tmp_path, hub_session):
        storage = SQLiteSession('app', base_path=tmp_path)
        storage.save(hub_session)
        storage.save(Session.from_dict({**hub_session.to_dict(), 'token': 'v1:new'}))

        assert storage.load().auth_token == 'v1:new'
        storage.close()

    def test_delete(self, tmp_path, hub_session):
        storage = SQLiteSession('app', base_path=tmp_path)
        storage.save(hub_session)
        storage.delete()

        assert storage.exists() is False
        assert storage.load() is None
        storage.close()

    def test_separate_config_keys(self, tmp_path, hub_session):
        path = tmp_path / 'shared.session'
        alice = SQLiteSession(path, config_key='alice')
        bob = SQLiteSession(path, config_key='bob')
        alice.save(hub_session)

        assert bob.load() is None
        alice.close()
        bob.close()
