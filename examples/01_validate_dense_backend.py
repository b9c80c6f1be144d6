"""Check a vectorized numpy kernel against the reference operations."""

import numpy as np

from tensorref import Aggr, assert_matches_reference, from_numpy, join, map, reduce
from tensorref import functions as fn

rng = np.random.default_rng(7)
query = rng.standard_normal((4,))
docs = rng.standard_normal((3, 4))

# Vectorized "backend": relu(docs @ query)
fast = np.maximum(docs @ query, 0.0)

# Reference: join on the shared axis, sum it away, then map relu over the cells
scores = reduce(join(from_numpy(docs, ["doc", "x"]), from_numpy(query, ["x"]), fn.mul), ["x"], Aggr.SUM)
reference = map(scores, fn.relu)

assert_matches_reference(fast, reference)
print(reference.to_spec())
