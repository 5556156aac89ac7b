import itertools

import pytest

from pancake import LogicError, PancakeStack, permutations


def assert_sorted(stack: PancakeStack):
    pi = stack.pi.tolist()
    for i in range(len(pi) - 1):
        assert pi[i] < pi[i + 1]


@pytest.mark.parametrize("values, flips", [
    ([3, 1, 2], 3),
    ([7, 6, 4, 2, 6, 7, 8, 7], 8),
    ([11, 5, 12, 3, 10, 3, 2, 5], 12),
    ([3, 12, 8, 12, 4, 7, 10, 3, 8, 10], 18),
])
def test_sort(values, flips):
    stack = PancakeStack(values)
    stack.sort()

    assert_sorted(stack)
    assert stack.is_sorted()
    assert stack.flips == flips


def test_sort_history():
    stack = PancakeStack([7, 6, 4, 2, 6, 7, 8, 7])
    stack.sort()

    history = stack.history()
    assert len(history) == stack.flips
    assert history['flip'].tolist() == list(range(1, stack.flips + 1))
    assert history['phase'].tolist() == ['merge'] * 4 + ['rotate'] * 4
    assert history['adjacencies'].tolist()[:4] == [4, 5, 6, 7]
    assert history['adjacencies'].iloc[-1] == len(stack) - 1

    # Flips made after sorting are not part of the procedure.
    stack.flip_after(0)
    assert stack.history()['phase'].iloc[-1] == 'manual'


@pytest.mark.parametrize("n", [0, 1, 2, 3])
def test_sort_all_small_stacks(n):
    for perm in itertools.permutations(range(n)):
        stack = PancakeStack(perm)
        stack.sort()
        assert stack.pi.tolist() == list(range(n)), perm


@pytest.mark.parametrize("n", [4, 5])
def test_sort_all_stacks(n):
    """Every stack of four or five pancakes goes through the merging steps and comes out sorted."""
    for perm in itertools.permutations(range(n)):
        stack = PancakeStack(perm)
        stack.sort()
        assert stack.pi.tolist() == list(range(n)), perm


def test_six_pancakes_sort_or_fail():
    """With six pancakes the merging steps can get stuck, but they must give up rather than run forever."""
    failed = []
    for perm in itertools.permutations(range(6)):
        stack = PancakeStack(perm)
        try:
            stack.sort()
        except LogicError:
            failed.append(perm)
            continue

        assert stack.is_sorted(), perm

    assert (0, 3, 4, 2, 5, 1) in failed
    assert (0, 1, 5, 3, 2, 4) in failed
    assert len(failed) < 720


@pytest.mark.parametrize("n", [1, 2, 5, 8])
def test_sorted_stack_needs_no_flips(n):
    stack = PancakeStack(range(n))
    stack.sort()
    assert stack.flips == 0
    assert stack.pi.tolist() == list(range(n))

    # Sorting again changes nothing either.
    stack.sort()
    assert stack.flips == 0


def test_sort_with_repeated_values():
    stack = PancakeStack([4, 4, 4, 4])
    stack.sort()
    assert stack.flips == 0

    stack = PancakeStack([0, 0])
    stack.sort()
    assert stack.pi.tolist() == [0, 1]


@pytest.mark.parametrize("n", [5, 6])
def test_rotations(n):
    """Stacks in order up to rotation skip straight to moving 0 to the top."""
    for shift in range(1, n):
        rotated = [(i + shift) % n for i in range(n)]
        assert permutations.count_adjacencies(rotated) == n - 1

        stack = PancakeStack(rotated)
        stack.sort()
        assert stack.is_sorted()
        assert stack.flips == 3


@pytest.mark.parametrize("n", [5, 6])
def test_reversed_rotations(n):
    # Fully reversed needs one flip of the whole stack.
    stack = PancakeStack(reversed(range(n)))
    stack.sort()
    assert stack.is_sorted()
    assert stack.flips == 1

    # Otherwise one flip of the whole stack turns it into a rotation.
    for shift in range(1, n):
        rotated = [(i + shift) % n for i in range(n)]
        stack = PancakeStack(rotated[::-1])
        stack.sort()
        assert stack.is_sorted()
        assert stack.flips == 4


def test_two_pancakes_upside_down():
    stack = PancakeStack([2, 1])
    stack.sort()
    assert stack.pi.tolist() == [0, 1]
    assert stack.flips == 1


def test_free_top_with_nowhere_to_go(monkeypatch):
    """Force the case where the top is free but neither neighbouring value starts or ends a block."""
    stack = PancakeStack([0, 2, 1, 3])
    monkeypatch.setattr(stack, 'is_free', lambda value: value == 0)
    monkeypatch.setattr(stack, 'starts_block', lambda value: False)
    monkeypatch.setattr(stack, 'ends_block', lambda value: False)

    with pytest.raises(LogicError):
        stack.sort()

    assert stack.flips == 0


def test_block_top_with_inconsistent_blocks(monkeypatch):
    """Force the merge case with a value behind the top block which does not end its own block."""
    stack = PancakeStack([0, 1, 3, 2])
    monkeypatch.setattr(stack, 'starts_block', lambda value: False)
    monkeypatch.setattr(stack, 'last_element_in_block', lambda value: 1)

    with pytest.raises(LogicError):
        stack.sort()

    assert stack.flips == 0


def test_merging_comes_back_round():
    """This stack returns to [5, 0, 3, 4, 2, 1] two steps after first reaching it."""
    stack = PancakeStack([0, 3, 4, 2, 5, 1])
    with pytest.raises(LogicError, match="repeated"):
        stack.sort()

    assert not stack.is_sorted()
    assert stack.history()['phase'].eq('merge').all()


def test_merging_reaches_inconsistent_blocks():
    """A real stack which ends up with 1 on top while 0 does not end its block."""
    stack = PancakeStack([0, 1, 5, 3, 2, 4])
    with pytest.raises(LogicError, match="Expected 0 to end its block"):
        stack.sort()
