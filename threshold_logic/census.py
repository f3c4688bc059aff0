"""
Census of threshold functions: classify every Boolean function of n inputs.

Identifications are independent, so the functions are split into chunks and
optionally classified in parallel worker processes.
"""

import multiprocessing as mp
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field

from .identification import BINATE, IdentificationResult, ThresholdIdentifier
from .truth_tables import TruthTable
from .verify import verify_result

MAX_CENSUS_VARS = 4

# Number of threshold functions of n variables (OEIS A000609)
KNOWN_COUNTS = {0: 2, 1: 4, 2: 14, 3: 104, 4: 1882}


@dataclass
class CensusResult:
    """Summary of classifying all functions of `num_vars` variables."""

    num_vars: int
    total: int = 0
    threshold: int = 0
    binate: int = 0
    infeasible: int = 0
    elapsed: float = 0.0
    failures: list[str] = field(default_factory=list)  # linear forms that failed verification

    @property
    def expected(self):
        return KNOWN_COUNTS.get(self.num_vars)


def classify_chunk(args) -> list[IdentificationResult]:
    """Classify functions start..stop-1 of n variables. Run in separate process."""
    num_vars, start, stop, backend, cover = args
    identifier = ThresholdIdentifier(backend=backend, cover=cover)
    return [identifier.identify(TruthTable(num_vars, bits)) for bits in range(start, stop)]


def classify_all(num_vars: int, backend: str = "pulp", cover: str = "isop", workers: int = 1,
                 chunk_size: int = 64) -> list[IdentificationResult]:
    """
    Classify every function of `num_vars` variables.

    Returns:
        Results indexed by the integer value of the truth table
    """
    if not 0 <= num_vars <= MAX_CENSUS_VARS:
        raise ValueError(f"Census supports 0..{MAX_CENSUS_VARS} variables, got {num_vars}")

    total = 1 << (1 << num_vars)
    chunks = [
        (num_vars, start, min(start + chunk_size, total), backend, cover)
        for start in range(0, total, chunk_size)
    ]

    if workers <= 1:
        results = []
        for chunk in chunks:
            results.extend(classify_chunk(chunk))
        return results

    by_start = {}
    with ProcessPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(classify_chunk, chunk): chunk[1] for chunk in chunks}
        for future in as_completed(futures):
            by_start[futures[future]] = future.result()

    results = []
    for start in sorted(by_start):
        results.extend(by_start[start])
    return results


def run_census(num_vars: int, backend: str = "pulp", cover: str = "isop", workers: int = 1,
               verbose: bool = False) -> CensusResult:
    """Classify all functions, verify every linear form, and count the outcomes."""
    if verbose:
        print(f"Classifying all {1 << (1 << num_vars)} functions of {num_vars} variables "
              f"({backend}, {cover}, {workers} worker{'s' if workers != 1 else ''})...", flush=True)

    start_time = time.time()
    results = classify_all(num_vars, backend=backend, cover=cover, workers=workers)

    census = CensusResult(num_vars=num_vars, total=len(results))
    for bits, result in enumerate(results):
        if result.is_threshold:
            census.threshold += 1
            valid, errors = verify_result(TruthTable(num_vars, bits), result)
            if not valid:
                census.failures.append(f"{bits:#x} {result.linear_form}: {errors[0]}")
        elif result.status == BINATE:
            census.binate += 1
        else:
            census.infeasible += 1

    census.elapsed = time.time() - start_time
    return census


def count_threshold_functions(num_vars: int, backend: str = "pulp", cover: str = "isop",
                              workers: int = 1) -> int:
    """Number of threshold functions of `num_vars` variables."""
    results = classify_all(num_vars, backend=backend, cover=cover, workers=workers)
    return sum(1 for r in results if r.is_threshold)


def print_census(census: CensusResult):
    print("=" * 60)
    print(f"Census: {census.num_vars} variables")
    print("=" * 60)
    print(f"Functions:          {census.total}")
    print(f"Threshold:          {census.threshold}")
    print(f"Binate (rejected):  {census.binate}")
    print(f"Unate, infeasible:  {census.infeasible}")
    if census.expected is not None:
        mark = "✓" if census.expected == census.threshold else "✗"
        print(f"Expected threshold: {census.expected} {mark}")
    print(f"Time:               {census.elapsed:.1f} seconds")
    if census.failures:
        print(f"\nVerification failures ({len(census.failures)}):")
        for failure in census.failures[:10]:
            print(f"  {failure}")


def default_workers() -> int:
    return mp.cpu_count()
