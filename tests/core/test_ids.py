"""Tests for IdGenerator — deterministic and random id suffixes."""

from mermaid_runner.core.ids import IdGenerator


class TestDeterministicMode:
    def test_starts_at_zero(self):
        gen = IdGenerator(deterministic=True)
        assert gen.next() == "0"
        assert gen.next() == "1"
        assert gen.next() == "2"

    def test_seed_is_prefixed(self):
        gen = IdGenerator(deterministic=True, seed="page-")
        assert [gen.next() for _ in range(3)] == ["page-0", "page-1", "page-2"]

    def test_none_seed_means_empty_prefix(self):
        gen = IdGenerator(deterministic=True, seed=None)
        assert gen.next() == "0"

    def test_fresh_generators_repeat_the_sequence(self):
        a = IdGenerator(deterministic=True, seed="s")
        b = IdGenerator(deterministic=True, seed="s")
        assert [a.next() for _ in range(5)] == [b.next() for _ in range(5)]

    def test_count_tracks_calls(self):
        gen = IdGenerator(deterministic=True)
        gen.next()
        gen.next()
        assert gen.count == 2


class TestRandomMode:
    def test_ids_are_unique(self):
        gen = IdGenerator()
        ids = {gen.next() for _ in range(500)}
        assert len(ids) == 500

    def test_ids_differ_between_generators(self):
        assert IdGenerator().next() != IdGenerator().next()

    def test_seed_ignored(self):
        gen = IdGenerator(deterministic=False, seed="page-")
        assert not gen.next().startswith("page-")

    def test_repr_mentions_mode(self):
        assert "random" in repr(IdGenerator())
        assert "deterministic" in repr(IdGenerator(True))
