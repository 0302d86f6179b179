"""
Tests for identity-keyed memoization.
"""

from gql_hooks.hooks import Memo


class TestMemo:
    """Test Memo."""

    def test_same_deps_reuse_value(self):
        """Test the factory runs once while dependencies keep their identity."""
        memo = Memo()
        dep = object()
        calls = []

        def factory():
            calls.append(1)
            return object()

        first = memo.get(factory, (dep,))
        second = memo.get(factory, (dep,))

        assert first is second
        assert len(calls) == 1

    def test_changed_identity_rebuilds(self):
        """Test equal but distinct dependencies rebuild the value."""
        memo = Memo()

        first = memo.get(object, ([1],))
        second = memo.get(object, ([1],))

        assert first is not second

    def test_dependency_count_change(self):
        """Test adding a dependency rebuilds the value."""
        memo = Memo()
        dep = object()

        first = memo.get(object, (dep,))
        second = memo.get(object, (dep, dep))

        assert first is not second

    def test_clear(self):
        """Test clearing forgets the cached value."""
        memo = Memo()
        dep = object()
        first = memo.get(object, (dep,))

        memo.clear()

        assert memo.value is None
        assert memo.get(object, (dep,)) is not first

    def test_value_property(self):
        """Test the cached value is exposed."""
        memo = Memo()

        assert memo.value is None
        value = memo.get(lambda: "cached", ())
        assert memo.value == value == "cached"
