"""
Tests for the namespace cache.
"""

from iscsiprefs.cache import ConfigCache, Namespace


class TestConfigCache:
    def test_namespaces_start_absent(self):
        cache = ConfigCache()
        for namespace in Namespace:
            assert cache.get(namespace) is None
            assert cache.is_modified(namespace) is False

    def test_materializing_does_not_mark_modified(self):
        cache = ConfigCache()
        assert cache.get(Namespace.TARGETS, True) == {}
        assert cache.get(Namespace.DISCOVERY, True) == {}
        assert cache.modified_namespaces() == set()

    def test_materialized_root_is_stable(self):
        cache = ConfigCache()
        root = cache.get(Namespace.TARGETS, True)
        assert cache.get(Namespace.TARGETS) is root
        assert cache.get(Namespace.TARGETS, True) is root

    def test_initiator_defaults(self):
        cache = ConfigCache()
        assert cache.get(Namespace.INITIATOR, True) == {"Name": "", "Alias": ""}

    def test_modified_flags_are_independent(self):
        cache = ConfigCache()
        cache.mark_modified(Namespace.DISCOVERY)
        assert cache.modified_namespaces() == {Namespace.DISCOVERY}
        cache.clear_modified()
        assert cache.modified_namespaces() == set()

    def test_instances_do_not_share_state(self):
        first, second = ConfigCache(), ConfigCache()
        first.get(Namespace.TARGETS, True)["x"] = {}
        assert second.get(Namespace.TARGETS) is None

    def test_snapshot_is_a_deep_copy(self):
        cache = ConfigCache()
        cache.get(Namespace.TARGETS, True)["x"] = {"nested": {}}
        snapshot = cache[Namespace.TARGETS].snapshot()
        snapshot["x"]["nested"]["changed"] = "yes"
        assert cache.get(Namespace.TARGETS) == {"x": {"nested": {}}}

    def test_preference_keys(self):
        assert Namespace.TARGETS.preference_key == "Target Nodes"
        assert Namespace.DISCOVERY.preference_key == "SendTargets Discovery"
        assert Namespace.INITIATOR.preference_key == "Initiator Node"
