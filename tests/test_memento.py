from geocoin.grid import CellBounds, CellCoordinate
from geocoin.memento import CacheRecord, MementoStack, RegistryMemento
from geocoin.models import Coin


def _memento(*values: int) -> RegistryMemento:
    return RegistryMemento(
        caches=(
            CacheRecord(
                cell=CellCoordinate(0, 0),
                bounds=CellBounds(0.0, 0.0, 1.0, 1.0),
                coins=tuple(Coin(id=f"0:0#{index}", value=value) for index, value in enumerate(values)),
                serial_counter=len(values),
            ),
        )
    )


def test_restore_never_pops_baseline() -> None:
    stack = MementoStack(_memento(1))

    assert stack.restore() is None
    assert stack.depth == 0
    assert stack.baseline == _memento(1)


def test_restore_pops_in_lifo_order() -> None:
    stack = MementoStack(_memento())
    stack.save(_memento(1))
    stack.save(_memento(1, 2))

    assert stack.restore() == _memento(1, 2)
    assert stack.restore() == _memento(1)
    assert stack.restore() is None


def test_snapshots_compare_structurally() -> None:
    assert _memento(3, 4) == _memento(3, 4)
    assert _memento(3, 4) != _memento(4, 3)
    assert _memento(3).cells == frozenset({CellCoordinate(0, 0)})


def test_rebase_discards_saved_levels() -> None:
    stack = MementoStack(_memento())
    stack.save(_memento(1))

    stack.rebase(_memento(9))

    assert not stack.can_restore
    assert stack.baseline == _memento(9)
