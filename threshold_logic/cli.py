"""Command-line interface for threshold logic identification."""

import argparse
import sys

from .census import default_workers, print_census, run_census
from .cubes import COVER_METHODS
from .export import to_c_code, to_equations, to_inequality, to_verilog
from .identification import ThresholdIdentifier
from .lp import BACKENDS
from .truth_tables import NAMED_FUNCTIONS, TruthTable, print_truth_table
from .verify import print_truth_table_comparison, verify_result

EXIT_THRESHOLD = 0
EXIT_NOT_THRESHOLD = 1
EXIT_ERROR = 2


def parse_table(text: str, use_hex: bool = False, num_vars: int = None) -> TruthTable:
    """Read a truth table given as a function name, binary string, or hex string."""
    if text in NAMED_FUNCTIONS:
        return TruthTable.named(text)
    if use_hex:
        return TruthTable.from_hex(text, num_vars)
    tt = TruthTable.from_binary(text)
    if num_vars is not None and tt.num_vars() != num_vars:
        raise ValueError(f"Binary truth table has {tt.num_vars()} variables, expected {num_vars}")
    return tt


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Decide whether a Boolean function is a threshold function",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Truth tables are written highest minterm first; bit k of the table is the
output for the assignment where x_i is bit i of k.

Examples:
  threshold-identify 1000                 AND of two inputs
  threshold-identify 11101000             3-input majority
  threshold-identify --hex e8             Same, as hex
  threshold-identify maj3 --backend sat   Use the MaxSAT backend
  threshold-identify 0110                 XOR (not a threshold function)
  threshold-identify 1000 --format verilog
  threshold-identify --census 3           Count threshold functions of 3 inputs
        """,
    )

    parser.add_argument(
        "table",
        nargs="?",
        help=f"Truth table (binary, hex with --hex, or one of: {', '.join(NAMED_FUNCTIONS)})",
    )
    parser.add_argument(
        "--hex",
        action="store_true",
        help="Read the truth table as a hex string",
    )
    parser.add_argument(
        "--vars", "-n",
        type=int,
        default=None,
        help="Number of variables (inferred from the table length by default)",
    )
    parser.add_argument(
        "--backend", "-b",
        choices=BACKENDS,
        default="pulp",
        help="Integer programming backend (default: pulp; sat only suits up to about 6 variables)",
    )
    parser.add_argument(
        "--cover", "-c",
        choices=COVER_METHODS,
        default="isop",
        help="Cube cover method (default: isop)",
    )
    parser.add_argument(
        "--format", "-f",
        choices=["text", "verilog", "c", "equations"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Print the truth table comparison for the linear form",
    )
    parser.add_argument(
        "--truth-table",
        action="store_true",
        help="Print the truth table and exit",
    )
    parser.add_argument(
        "--census",
        type=int,
        metavar="N",
        default=None,
        help="Classify every function of N variables and print the counts",
    )
    parser.add_argument(
        "--workers", "-j",
        type=int,
        default=1,
        help="Worker processes for --census (0 = all cores, default: 1)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args(argv)

    if args.census is None and args.table is None:
        parser.error("a truth table is required unless --census is given")

    try:
        if args.census is not None:
            workers = args.workers if args.workers > 0 else default_workers()
            census = run_census(args.census, backend=args.backend, cover=args.cover,
                                workers=workers, verbose=args.verbose)
            print_census(census)
            return EXIT_THRESHOLD if not census.failures else EXIT_ERROR

        tt = parse_table(args.table, use_hex=args.hex, num_vars=args.vars)

        if args.truth_table:
            print_truth_table(tt)
            return EXIT_THRESHOLD

        # Progress output only makes sense for the text format
        verbose = args.verbose and args.format == "text"
        identifier = ThresholdIdentifier(backend=args.backend, cover=args.cover, verbose=verbose)

        if verbose:
            print("Threshold Logic Identification")
            print("=" * 40)
            print(f"Function: {tt.to_binary()} ({tt.num_vars()} variables)")
            print()

        result = identifier.identify(tt)

        if args.format == "verilog":
            print(to_verilog(result))
        elif args.format == "c":
            print(to_c_code(result))
        elif args.format == "equations":
            print(to_inequality(result))
        else:
            if verbose:
                print()
            print(to_equations(result))

        if result.is_threshold:
            valid, errors = verify_result(tt, result)
            if args.verify:
                print()
                print_truth_table_comparison(tt, result.linear_form)
            if not valid:
                for err in errors:
                    print(f"Verification error: {err}", file=sys.stderr)
                return EXIT_ERROR

        return EXIT_THRESHOLD if result.is_threshold else EXIT_NOT_THRESHOLD

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
