import argparse
import logging
import sys

from wavelet.errors import EmptySequence, WaveletError
from wavelet.queries import AccessQuery, RankQuery, QuantileQuery, execute, parse_query
from wavelet.wavelet_tree import WaveletTree
from utils.data_loader import load_values
from utils.utils import parse_values, value_bounds

MENU_OPTIONS = {
    1: ('access', "Enter employee index (0-based): "),
    2: ('rank', "Enter position (i) and salary to count (x): "),
    3: ('quantile', "Enter start index (l), end index (r), and k: "),
}

FAILURE_MESSAGES = {
    'access': "Invalid index.",
    'rank': "Invalid input.",
    'quantile': "Invalid input or out of range.",
}

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Salary analysis backed by a wavelet tree.")
    parser.add_argument('--input', help="file of whitespace-separated salaries (.gz accepted); default reads one line from stdin")
    parser.add_argument('--size-limit', type=int, default=None, help="use at most this many salaries from --input")
    parser.add_argument('--show-tree', action='store_true', help="print the tree structure after construction")
    parser.add_argument('--query', action='append', default=[],
                        help="run a query such as 'access 3', 'rank 4 50000' or 'quantile 0 4 3' and exit; repeatable")
    parser.add_argument('--log-level', default='WARNING', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser.parse_args(argv)

def read_salaries(args, read=input):
    try:
        if args.input:
            return load_values(args.input, args.size_limit)
        print("Enter employee salaries (space-separated): ")
        try:
            line = read()
        except EOFError:
            line = ""
        return parse_values(line)
    except EmptySequence:
        print("Salary list cannot be empty.")
    except ValueError:
        print("Invalid salary input. Only integers allowed.")
    return None

def describe(result):
    query = result.query
    if not result.ok:
        logging.info(f"Query {query!r} failed: {result.error}")
        return FAILURE_MESSAGES[query.name]
    if isinstance(query, AccessQuery):
        return f"Salary of employee[{query.index}] = ${result.value}"
    if isinstance(query, RankQuery):
        return f"Employees with salary ${query.value} from index 0 to {query.position} = {result.value}"
    if isinstance(query, QuantileQuery):
        return f"The {query.k}-th smallest salary in employees[{query.start} to {query.end}] = ${result.value}"
    raise TypeError(f"unsupported query {query!r}")

def run_queries(tree, texts):
    """Run each query text once; returns the number that failed."""
    failures = 0
    for text in texts:
        try:
            query = parse_query(text)
        except ValueError as e:
            print(f"Invalid query '{text}': {e}")
            failures += 1
            continue
        result = execute(tree, query)
        print(describe(result))
        failures += not result.ok
    return failures

def run_menu(tree, read=input):
    while True:
        print("\nMenu:")
        print("1. Get salary of an employee")
        print("2. Count employees with a specific salary up to a position")
        print("3. Find the k-th smallest salary in a team range")
        print("4. Exit")

        try:
            choice_text = read("Choose an option: ")
        except EOFError:
            return

        try:
            choice = int(choice_text)
        except ValueError:
            print("Invalid input. Enter a number from 1-4.")
            continue

        if choice == 4:
            print("Exiting Salary Analyzer. Goodbye!")
            return
        if choice not in MENU_OPTIONS:
            print("Please choose a valid option (1-4).")
            continue

        name, prompt = MENU_OPTIONS[choice]
        try:
            query = parse_query(f"{name} {read(prompt)}")
        except EOFError:
            return
        except ValueError:
            print(FAILURE_MESSAGES[name])
            continue
        print(describe(execute(tree, query)))

def main(argv=None, read=input):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format='%(asctime)s %(levelname)s %(message)s')

    if not args.query:
        print("Welcome to TechCorp HR Salary Analyzer!")

    salaries = read_salaries(args, read)
    if salaries is None:
        return 1

    low, high = value_bounds(salaries)
    try:
        tree = WaveletTree(salaries, low, high)
    except WaveletError as e:
        print(f"Cannot index salaries: {e}")
        return 1
    logging.info(f"Wavelet tree size metrics: {tree.get_size_metrics()}")

    if args.show_tree:
        tree.print_tree()

    if args.query:
        return 1 if run_queries(tree, args.query) else 0

    print("\nWavelet Tree constructed for employee salaries!")
    run_menu(tree, read)
    return 0

if __name__ == "__main__":
    sys.exit(main())
