import random

import pytest

from satquiz.sampler import sample


class TestSample:
    def test_full_session_from_large_bank(self, large_bank, rng):
        drawn = sample(large_bank, 10, rng)
        assert len(drawn) == 10
        assert len({q.question for q in drawn}) == 10
        assert all(q in large_bank for q in drawn)

    def test_small_bank_runs_short(self, small_bank, rng):
        drawn = sample(small_bank, 10, rng)
        assert len(drawn) == 3
        assert sorted(q.question for q in drawn) == sorted(q.question for q in small_bank)

    def test_does_not_mutate_bank(self, large_bank, rng):
        before = list(large_bank)
        sample(large_bank, 10, rng)
        assert large_bank == before

    def test_same_seed_same_draw(self, large_bank):
        assert sample(large_bank, 10, random.Random(7)) == sample(
            large_bank, 10, random.Random(7)
        )

    def test_draws_vary(self, large_bank, rng):
        draws = {tuple(q.question for q in sample(large_bank, 10, rng)) for _ in range(20)}
        assert len(draws) > 1

    def test_order_is_shuffled(self, large_bank):
        # Every question should be able to lead the session.
        leaders = {sample(large_bank, 10, random.Random(seed))[0].question for seed in range(400)}
        assert len(leaders) == len(large_bank)

    def test_empty_bank(self, rng):
        with pytest.raises(ValueError):
            sample([], 10, rng)
