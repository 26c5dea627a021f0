"""Tests for OptionsStore merge and reset."""

from __future__ import annotations

from warden.config.options import OptionsStore, rename_legacy_keys


class TestOptionsStore:
    def test_defaults_without_overrides(self) -> None:
        store = OptionsStore()
        assert store.options.clear is False
        assert store.options.notify is True

    def test_overrides_win(self) -> None:
        store = OptionsStore({"clear": True, "group": ["backend"]})
        assert store.options.clear is True
        assert store.options.group == ["backend"]

    def test_none_means_not_given(self) -> None:
        store = OptionsStore({"notify": None, "latency": None})
        assert store.options.notify is True
        assert store.options.latency is None

    def test_unknown_keys_pass_through(self) -> None:
        merged = OptionsStore.merge({"custom": [1, 2]})
        assert merged.get("custom") == [1, 2]

    def test_reset_discards_previous_session_options(self) -> None:
        store = OptionsStore({"watchdir": ["old"], "clear": True})
        options = store.reset({"clear": False})
        assert options.watchdir == []
        assert options.clear is False
        assert store.options is options

    def test_merge_does_not_touch_store(self) -> None:
        store = OptionsStore({"clear": True})
        OptionsStore.merge({"clear": False})
        assert store.options.clear is True


class TestRenameLegacyKeys:
    def test_renamed_key_is_moved(self) -> None:
        data, renamed = rename_legacy_keys({"watch_dir": ["src"], "clear": True})
        assert data == {"watchdir": ["src"], "clear": True}
        assert renamed == [("watch_dir", "watchdir")]

    def test_current_key_wins(self) -> None:
        data, renamed = rename_legacy_keys({"notify": True, "notification": False})
        assert data == {"notify": True}
        assert renamed == [("notification", "notify")]

    def test_nothing_to_rename(self) -> None:
        source = {"clear": True}
        data, renamed = rename_legacy_keys(source)
        assert data == source
        assert data is not source
        assert renamed == []
