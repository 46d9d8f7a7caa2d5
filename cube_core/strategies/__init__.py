"""
Strategy Package - pluggable computation strategies for the matrix.

Each family is a set of small capability classes plus stock implementations:

- reducer / reducers: two-phase folds (prepare, reduce, present)
- transformer / transformers: per-cell content remapping
- deriver / derivers: ordered per-key scans
- partitioner / partitioners: position → labels
- squasher: two-cell survivor rule for squash
- pairwise / operators: binary cell computations with comparers
- sampler: position filters

Capability checks (base.require) run when an operation is requested.
"""

# Capability checks
from .base import Combination, has_capability, require

# Reducers
from .reducer import (
    Reducer,
    Prepare,
    PrepareWithValue,
    PresentSingle,
    PresentMultiple,
    PresentSingleAndMultiple,
    CombinationReducer,
)
from .reducers import Count, Sum, Mean, Min, Max, Moments, Entropy

# Transformers
from .transformer import (
    Transformer,
    Present,
    PresentWithValue,
    PresentExpanded,
    PresentExpandedWithValue,
    CombinationTransformer,
)
from .transformers import (
    Indicator,
    Binarise,
    Power,
    SquareRoot,
    Subtract,
    Fraction,
    Normalise,
    Standardise,
)

# Derivers
from .deriver import Deriver, Initialise, InitialiseWithValue, CombinationDeriver
from .derivers import Gradient, Delta, MovingAverage

# Partitioners
from .partitioner import Partitioner, Assign, AssignWithValue
from .partitioners import (
    BinaryHashSplit,
    TernaryHashSplit,
    HashSplit,
    BinaryDateSplit,
    TernaryDateSplit,
    DateSplit,
)

# Squashers
from .squasher import (
    Squasher,
    Reduce,
    ReduceWithValue,
    PreservingMaxPosition,
    PreservingMinPosition,
    KeepSlice,
)

# Pairwise operators
from .pairwise import (
    Comparer,
    All,
    Diagonal,
    Upper,
    UpperDiagonal,
    Lower,
    LowerDiagonal,
    Operator,
    Compute,
    ComputeWithValue,
    CombinationOperator,
)
from .operators import Plus, Minus, Times, Divide, Concatenate

# Samplers
from .sampler import Sampler, Select, SelectWithValue, RandomSample, HashSample
