import pytest

from tensorref import Dimension, TensorType, TensorValue

A3 = Dimension.indexed("a", 3)
B1 = Dimension.indexed("b", 1)
C = Dimension.mapped("c")
D5 = Dimension.indexed("d", 5)
E = Dimension.mapped("e")

MIXED_5D = TensorType.of(A3, B1, C, D5, E)


def mixed_5d_some_cells(square: bool) -> TensorValue:
    return TensorValue.build(
        MIXED_5D,
        [
            ({"a": 1, "b": 0, "c": "foo", "d": 2, "e": "bar"}, 4.0 if square else 2.0),
            ({"a": 2, "b": 0, "c": "bar", "d": 3, "e": "bar"}, 9.0 if square else 3.0),
            ({"a": 0, "b": 0, "c": "foo", "d": 4, "e": "foo"}, 16.0 if square else 4.0),
            ({"a": 1, "b": 0, "c": "bar", "d": 0, "e": "qux"}, 25.0 if square else 5.0),
            ({"a": 2, "b": 0, "c": "qux", "d": 1, "e": "foo"}, 36.0 if square else 6.0),
        ],
    )


def sparse_2d_some_cells(square: bool) -> TensorValue:
    return TensorValue.build(
        TensorType.of(C, E),
        [
            ({"c": "foo", "e": "foo"}, 1.0),
            ({"c": "foo", "e": "bar"}, 4.0 if square else 2.0),
            ({"c": "bar", "e": "bar"}, 9.0 if square else 3.0),
            ({"c": "qux", "e": "foo"}, 16.0 if square else 4.0),
            ({"c": "qux", "e": "qux"}, 25.0 if square else 5.0),
        ],
    )


def dense_2d_some_cells(square: bool) -> TensorValue:
    return TensorValue.build(
        TensorType.of(A3, D5),
        [
            ({"a": 1, "d": 2}, 9.0 if square else 3.0),
            ({"a": 2, "d": 4}, 16.0 if square else 4.0),
            ({"a": 1, "d": 0}, 25.0 if square else 5.0),
        ],
    )


@pytest.fixture
def mixed_5d() -> TensorValue:
    return mixed_5d_some_cells(False)


@pytest.fixture
def mixed_5d_squared() -> TensorValue:
    return mixed_5d_some_cells(True)


@pytest.fixture
def sparse_2d() -> TensorValue:
    return sparse_2d_some_cells(False)


@pytest.fixture
def sparse_2d_squared() -> TensorValue:
    return sparse_2d_some_cells(True)


@pytest.fixture
def dense_2d() -> TensorValue:
    return dense_2d_some_cells(False)


@pytest.fixture
def dense_2d_squared() -> TensorValue:
    return dense_2d_some_cells(True)


@pytest.fixture
def peek_children():
    """Children indexed by peek specs: 0,1,5 -> 42.0, 2 -> 0.0, 3 -> 1.0, 4 -> -2.0."""
    too_big = TensorValue.scalar(42.0)
    return [
        too_big,
        too_big,
        TensorValue.scalar(0.0),
        TensorValue.scalar(1.0),
        TensorValue.scalar(-2.0),
        too_big,
    ]
