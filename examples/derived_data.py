"""
Derived Data Walkthrough

This script builds a small instance x feature x date matrix and runs the
typical feature-engineering steps on it:
1. Inspect the matrix (shape, kinds, names)
2. Summarise it (reductions, moments)
3. Derive new features (gradients, standardisation, correlation)
4. Split it for training and testing
"""

from datetime import date

from sparsecube import (
    Matrix,
    Content,
    ContinuousSchema,
    NominalSchema,
    Over,
    Along,
    First,
    Second,
    Third,
    correlation,
    mutual_information,
    gradient_features,
)
from cube_core.strategies import (
    Count,
    Mean,
    Max,
    Moments,
    Standardise,
    PreservingMaxPosition,
    BinaryHashSplit,
)


def print_section(title):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def build_matrix():
    """Customers x measurements x day."""
    readings = {
        "alice": {"spend": [10, 16, 19], "visits": [1, 3, 4]},
        "bob": {"spend": [40, 38, 30], "visits": [6, 5, 2]},
        "carol": {"spend": [5, 9, 14], "visits": [2, 2, 5]},
    }
    days = [date(2020, 1, 1), date(2020, 1, 3), date(2020, 1, 7)]

    rows = []
    for customer, features in readings.items():
        for feature, values in features.items():
            for day, v in zip(days, values):
                rows.append((customer, feature, day, Content(ContinuousSchema(), v)))
    return Matrix.from_tuples(rows)


def show(matrix):
    for line in matrix.to_short_strings():
        print(f"  {line}")


def inspect(data):
    print_section("STEP 1: Inspect")
    print("\nShape:")
    show(data.shape())

    print("\nFeature kinds:")
    for pos, kind in data.types(Over(Second)):
        print(f"  {pos.to_short_string()}: {kind.value}")


def summarise(data):
    print_section("STEP 2: Summarise")
    latest = data.squash(Third, PreservingMaxPosition())

    print("\nLatest reading per customer and feature:")
    show(latest)

    print("\nPer-feature count, mean and max:")
    show(latest.reduce_and_expand(Over(Second), [Count("count"), Mean("mean"), Max("max")]))

    print("\nPer-feature moments:")
    show(latest.reduce_and_expand(Over(Second), Moments()))
    return latest


def derive(data, latest):
    print_section("STEP 3: Derive")
    print("\nGradients (change per day):")
    show(gradient_features(data))

    print("\nStandardised latest readings:")
    stats = latest.reduce_and_expand(Over(Second), Moments()).to_map(Over(First))
    show(latest.transform_with_value(Standardise(Second), stats))

    print("\nFeature correlation over customers:")
    show(correlation(latest, Over(Second)))

    print("\nMutual information between segment and trend:")
    segments = Matrix.from_tuples([
        ("alice", "segment", Content(NominalSchema(), "retail")),
        ("bob", "segment", Content(NominalSchema(), "business")),
        ("carol", "segment", Content(NominalSchema(), "retail")),
        ("alice", "trend", Content(NominalSchema(), "up")),
        ("bob", "trend", Content(NominalSchema(), "down")),
        ("carol", "trend", Content(NominalSchema(), "up")),
    ])
    show(mutual_information(segments, Over(Second)))


def split(data):
    print_section("STEP 4: Split")
    parts = data.partition(BinaryHashSplit(First, 70, "train", "test"))
    for key in parts.keys():
        customers = parts.get(key).names(Over(First)).positions()
        print(f"  {key}: {sorted(p.to_short_string() for p in customers)}")

    print("\nDaily means along customers:")
    show(data.reduce(Along(First), Mean()))


def main():
    """Run the walkthrough."""
    print("\n" + "=" * 70)
    print("  SPARSECUBE - DERIVED DATA WALKTHROUGH")
    print("=" * 70)

    data = build_matrix()
    inspect(data)
    latest = summarise(data)
    derive(data, latest)
    split(data)

    print("\n" + "=" * 70 + "\n")


if __name__ == "__main__":
    main()
