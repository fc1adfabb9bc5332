import pytest

from voxel_store import VoxelStore


def test_add_inserts_new_block():
    store = VoxelStore()
    assert store.add((0, 0.5, 0))
    assert len(store) == 1
    assert store.all() == ((0.0, 0.5, 0.0),)


def test_add_same_cell_twice_keeps_one():
    store = VoxelStore()
    assert store.add((1, 0.5, 2))
    assert not store.add((1, 0.5, 2))
    assert len(store) == 1


def test_add_within_tolerance_is_deduplicated():
    store = VoxelStore()
    store.add((1.0, 0.5, 2.0))
    assert not store.add((1.05, 0.5, 1.96))
    assert len(store) == 1


def test_neighbouring_cells_are_distinct():
    store = VoxelStore()
    store.add((0, 0.5, 0))
    assert store.add((1, 0.5, 0))
    assert store.add((0, 1.5, 0))
    assert len(store) == 3


def test_clear_all_empties_store():
    store = VoxelStore()
    for x in range(5):
        store.add((x, 0.5, 0))
    assert store.clear_all() == 5
    assert store.all() == ()
    assert len(store) == 0


def test_clear_all_is_idempotent():
    store = VoxelStore()
    assert store.clear_all() == 0
    assert store.clear_all() == 0
    assert store.all() == ()


def test_all_is_a_snapshot():
    store = VoxelStore()
    store.add((0, 0.5, 0))
    snapshot = store.all()
    store.add((2, 0.5, 0))
    store.clear_all()
    assert snapshot == ((0.0, 0.5, 0.0),)


def test_contains_uses_tolerance():
    store = VoxelStore()
    store.add((3, 0.5, -1))
    assert (3.02, 0.5, -1) in store
    assert (3.5, 0.5, -1) not in store
    assert list(store) == [(3.0, 0.5, -1.0)]


@pytest.mark.parametrize("tolerance, expected", [(0.1, 2), (1.5, 1)])
def test_custom_tolerance(tolerance, expected):
    store = VoxelStore(tolerance=tolerance)
    store.add((0, 0.5, 0))
    store.add((1, 0.5, 0))
    assert len(store) == expected
