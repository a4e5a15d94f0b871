"""Tests for the Streamlit pages, run headless through streamlit's AppTest."""

from datetime import date
from pathlib import Path

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

from subtracker.config import get_settings
from subtracker.models.subscription import Subscription
from subtracker.persistence import SubscriptionPersistence
from subtracker.services.storage import FileKeyValueStore


APP_PATH = str(Path(__file__).resolve().parent.parent / "app" / "main.py")


@pytest.fixture
def data_dir(monkeypatch, tmp_path):
    """Point the app at an empty file backend under tmp_path."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SUBTRACKER_STORAGE_BACKEND", "file")
    monkeypatch.setenv("SUBTRACKER_STORAGE_DATA_DIR", str(tmp_path / "data"))
    get_settings.cache_clear()
    st.cache_resource.clear()
    yield tmp_path / "data"
    get_settings.cache_clear()
    st.cache_resource.clear()


def seed(data_dir, *subscriptions):
    SubscriptionPersistence(FileKeyValueStore(data_dir)).save(list(subscriptions))


def run_app():
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    assert not at.exception
    return at


def card_markdown(at):
    return [m.value for m in at.markdown if "subscription-name" in m.value]


class TestHomePage:
    """Tests for the subscription list page."""

    def test_empty_list_shows_hint(self, data_dir):
        at = run_app()
        assert card_markdown(at) == []
        assert len(at.info) == 1

    def test_card_shows_record(self, data_dir):
        seed(data_dir, Subscription(name="Netflix", amount=15.49, renewal_date=date(2026, 10, 18)))

        cards = card_markdown(run_app())

        assert len(cards) == 1
        assert "Netflix" in cards[0]
        assert "$15.49" in cards[0]
        assert "Oct 18, 2026" in cards[0]

    def test_name_markup_is_escaped(self, data_dir):
        name = '<img src=x onerror="alert(1)"> & <b>Gym</b>'
        seed(data_dir, Subscription(name=name, amount=1, renewal_date=date(2026, 1, 1)))

        cards = card_markdown(run_app())

        assert len(cards) == 1
        assert "<img" not in cards[0]
        assert "<b>" not in cards[0]
        assert "&lt;img src=x onerror=&quot;alert(1)&quot;&gt; &amp; &lt;b&gt;Gym&lt;/b&gt;" in cards[0]

    def test_delete_choices_list_each_record(self, data_dir):
        seed(
            data_dir,
            Subscription(name="A", amount=1, renewal_date=date(2026, 1, 1)),
            Subscription(name="A", amount=1, renewal_date=date(2026, 1, 1)),
        )

        at = run_app()

        # Duplicates stay separate choices because options are keyed by id
        assert list(at.multiselect[0].options) == [
            "A · $1.00 · Jan 1, 2026",
            "A · $1.00 · Jan 1, 2026",
        ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
