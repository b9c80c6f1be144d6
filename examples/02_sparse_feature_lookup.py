"""Mixed sparse/dense lookups: peek with data-dependent labels, then aggregate."""

from tensorref import Aggr, Dimension, Index, TensorType, TensorValue, concat, peek, reduce

weights = TensorValue.build(
    TensorType.of(Dimension.mapped("term"), Dimension.indexed("field", 2)),
    [
        ({"term": "tensor", "field": 0}, 1.5),
        ({"term": "tensor", "field": 1}, 0.5),
        ({"term": "algebra", "field": 0}, 2.0),
        ({"term": "7", "field": 1}, 3.0),
    ],
)

# The selected field and term id come from earlier sub-expressions
children = [TensorValue.scalar(1.0), TensorValue.scalar(7.0), TensorValue.scalar(42.0)]

by_field = peek(weights, {"field": 0}, children)
print(by_field.to_spec())
print(peek(weights, {"term": 1, "field": Index(1)}, children).to_spec())

# Out of range: a valid, empty tensor
print(peek(weights, {"field": 2}, children).to_spec())

total = reduce(concat(by_field, by_field, "copy"), [], Aggr.SUM)
print(total.to_spec())
