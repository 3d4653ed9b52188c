# tests/test_client.py

"""
Storage Client Tests - server calls with local fallback
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
import requests

from macroscore.storage.client import ScoreStorageClient
from macroscore.storage.score_store import JsonScoreStore, SavedScore, ScoreStorageError


@pytest.fixture
def fallback(tmp_path):
    return JsonScoreStore(tmp_path / "macro-scores-local.json", max_entries=20)


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def storage_client(fallback, session):
    return ScoreStorageClient("http://localhost:3001/api/", fallback, timeout=2, session=session)


@pytest.fixture
def saved():
    return SavedScore(
        id='abc', name='USD', timestamp=datetime(2024, 5, 1, 12, 0),
        total_score=0.51, bias='Mild Bullish', bias_color='#22c55e', data={'cpi': 3.5}
    )


def ok_response(payload=None):
    response = MagicMock()
    response.ok = True
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    return response


class TestSave:

    def test_remote_save(self, storage_client, session, fallback, saved):
        session.post.return_value = ok_response({'success': True, 'id': 'abc'})

        outcome = storage_client.save(saved)

        assert outcome.remote is True
        assert outcome.score is saved
        session.post.assert_called_once_with(
            "http://localhost:3001/api/scores", json=saved.to_dict(), timeout=2
        )
        assert len(fallback) == 0

    def test_falls_back_when_server_down(self, storage_client, session, fallback, saved):
        session.post.side_effect = requests.ConnectionError("refused")

        outcome = storage_client.save(saved)

        assert outcome.remote is False
        assert [s.id for s in fallback.list_scores()] == ['abc']

    def test_falls_back_on_server_error(self, storage_client, session, fallback, saved):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        session.post.return_value = response

        assert storage_client.save(saved).remote is False
        assert len(fallback) == 1


class TestList:

    def test_remote_list(self, storage_client, session, saved):
        session.get.return_value = ok_response([saved.to_dict()])

        scores = storage_client.list_scores()

        assert scores == [saved]
        session.get.assert_called_once_with("http://localhost:3001/api/scores", timeout=2)

    def test_falls_back_on_timeout(self, storage_client, session, fallback, saved):
        fallback.append(saved)
        session.get.side_effect = requests.Timeout("slow")

        assert [s.id for s in storage_client.list_scores()] == ['abc']

    def test_falls_back_on_non_list_payload(self, storage_client, session, fallback, saved):
        fallback.append(saved)
        session.get.return_value = ok_response({'not': 'a list'})

        assert [s.id for s in storage_client.list_scores()] == ['abc']

    def test_skips_invalid_items(self, storage_client, session, fallback, saved):
        session.get.return_value = ok_response([{'name': 'no id'}, saved.to_dict(), 'junk'])

        assert storage_client.list_scores() == [saved]
        assert len(fallback) == 0

    def test_all_items_invalid_is_empty_not_fallback(self, storage_client, session, fallback, saved):
        fallback.append(saved)
        session.get.return_value = ok_response([{'name': 'no id'}])

        assert storage_client.list_scores() == []


class TestDelete:

    def test_remote_delete(self, storage_client, session, fallback, saved):
        fallback.append(saved)
        session.delete.return_value = ok_response({'success': True})

        storage_client.delete('abc')

        session.delete.assert_called_once_with("http://localhost:3001/api/scores/abc", timeout=2)
        assert len(fallback) == 0

    def test_delete_failure_raises_after_local_removal(self, storage_client, session, fallback, saved):
        fallback.append(saved)
        session.delete.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ScoreStorageError):
            storage_client.delete('abc')
        assert len(fallback) == 0


class TestAvailability:

    def test_available(self, storage_client, session):
        session.get.return_value = ok_response({'status': 'ok'})
        assert storage_client.is_available() is True

    def test_unavailable(self, storage_client, session):
        session.get.side_effect = requests.ConnectionError("refused")
        assert storage_client.is_available() is False
