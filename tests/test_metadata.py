"""
Metadata store: identity-keyed facts and the ABSENT sentinel.
"""

from strix.metadata import ABSENT, BASE_PATH, METHOD, PATH, MetadataStore


class TestMetadataStore:

    def test_get_returns_absent_for_unknown_pair(self, store):
        class Foo:
            pass

        assert store.get(Foo, BASE_PATH) is ABSENT
        assert store.has(Foo, BASE_PATH) is False

    def test_set_then_get(self, store):
        class Foo:
            pass

        store.set(Foo, BASE_PATH, "/foo")
        assert store.get(Foo, BASE_PATH) == "/foo"
        assert store.has(Foo, BASE_PATH) is True

    def test_second_set_overwrites(self, store):
        class Foo:
            pass

        store.set(Foo, PATH, "/a")
        store.set(Foo, PATH, "/b")
        assert store.get(Foo, PATH) == "/b"
        assert len(store) == 1

    def test_keys_are_independent(self, store):
        def handler():
            pass

        store.set(handler, METHOD, "GET")
        store.set(handler, PATH, "/")
        assert store.get(handler, METHOD) == "GET"
        assert store.get(handler, PATH) == "/"

    def test_subjects_compared_by_identity(self, store):
        def make():
            def handler():
                pass
            return handler

        first, second = make(), make()
        store.set(first, PATH, "/first")

        assert first is not second
        assert store.get(second, PATH) is ABSENT

    def test_custom_default(self, store):
        assert store.get(object(), PATH, default=None) is None

    def test_falsy_values_are_present(self, store):
        class Foo:
            pass

        store.set(Foo, BASE_PATH, "")
        assert store.get(Foo, BASE_PATH) == ""
        assert store.has(Foo, BASE_PATH) is True

    def test_records_in_insertion_order(self, store):
        class A:
            pass

        class B:
            pass

        store.set(A, BASE_PATH, "/a")
        store.set(B, BASE_PATH, "/b")

        assert list(store.records()) == [(A, BASE_PATH, "/a"), (B, BASE_PATH, "/b")]

    def test_stores_are_isolated(self):
        class Foo:
            pass

        one, two = MetadataStore(), MetadataStore()
        one.set(Foo, PATH, "/")
        assert two.get(Foo, PATH) is ABSENT


class TestAbsent:

    def test_absent_is_falsy(self):
        assert not ABSENT

    def test_absent_repr(self):
        assert repr(ABSENT) == "ABSENT"
