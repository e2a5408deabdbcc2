#!/usr/bin/env python3

import argparse
import concurrent.futures
import fnmatch
import logging
import multiprocessing
import os
import sys
from dataclasses import dataclass, replace
from typing import List, Optional

from .config import MAX_STEPS, SimConfig
from .errors import SimulatorError
from .iss import ExecutionEngine
from .loader import load_elf_segments, load_hex_segments, load_program

log = logging.getLogger(__name__)

TEST_PATTERN = "rv32ui-p-*"


@dataclass
class TestResult:
    """Outcome of one program run"""
    __test__ = False

    name: str
    passed: bool
    instret: int = 0
    error: Optional[str] = None


def find_tests(directory: str, pattern: str = TEST_PATTERN) -> List[str]:
    """Return the test binaries in a directory, skipping objdump listings."""
    tests = []
    for entry in sorted(os.listdir(directory)):
        path = os.path.join(directory, entry)
        if not os.path.isfile(path) or entry.endswith(".dump"):
            continue
        if fnmatch.fnmatch(entry, pattern):
            tests.append(path)
    return tests


def read_task_list(filename: str) -> List[str]:
    """Read and return list of tests from file."""
    with open(filename, 'r') as f:
        return [line.strip() for line in f if line.strip()]


def run_test(test: str, config: SimConfig, max_steps: int = MAX_STEPS,
             trace_path: Optional[str] = None) -> TestResult:
    """Reset, load, and run one program until it stops or fails."""
    name = os.path.basename(test)
    engine = ExecutionEngine(config)
    if trace_path:
        engine.trace = []
    log.debug("test %s", test)
    try:
        try:
            if test.endswith(".hex"):
                segments = load_hex_segments(test, config.entry_point)
            else:
                segments = load_elf_segments(test)
            load_program(engine, segments)
        except SimulatorError:
            raise
        except Exception as e:
            # unreadable or malformed program image
            log.error("could not load %s: %s", test, e)
            return TestResult(name, False, 0, f"load error: {e}")
        engine.set_pc(config.entry_point)
        instret = engine.run(max_steps)
        result = TestResult(name, True, instret)
    except SimulatorError as e:
        result = TestResult(name, False, engine.instret, str(e))
    finally:
        if trace_path:
            with open(trace_path, 'w') as f:
                f.write('\n'.join(engine.trace))
    return result


def run_tests(tests: List[str], config: SimConfig, max_steps: int = MAX_STEPS,
              jobs: int = 1, trace_dir: Optional[str] = None) -> List[TestResult]:
    """Run programs on a thread pool, each with its own engine; results keep input order."""
    if trace_dir:
        os.makedirs(trace_dir, exist_ok=True)

    def trace_for(test):
        if not trace_dir:
            return None
        return os.path.join(trace_dir, os.path.basename(test) + ".log")

    with concurrent.futures.ThreadPoolExecutor(max_workers=max(1, jobs)) as executor:
        futures = [executor.submit(run_test, test, config, max_steps, trace_for(test)) for test in tests]
        return [future.result() for future in futures]


def report(result: TestResult) -> str:
    if result.passed:
        return f"{result.name} {'.' * (50 - len(result.name))}. \033[92mPASSED\033[0m"
    return f"{result.name} {'.' * (50 - len(result.name))}. \033[91mFAILED\033[0m ({result.error})"


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="RISC-V Instruction Set Simulator (RV32I) test runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  %(prog)s riscv-tests/isa
  %(prog)s riscv-tests/isa/rv32ui-p-add -o traces
  %(prog)s -t tasks.txt -j 8
        '''
    )

    parser.add_argument(
        'paths',
        nargs='*',
        metavar='PATH',
        help='Test binaries, or directories searched for rv32ui-p-* tests'
    )

    parser.add_argument(
        '-t', '--task-list',
        help='Path to a file listing one test binary per line'
    )

    parser.add_argument(
        '-j', '--jobs',
        type=int,
        default=multiprocessing.cpu_count(),
        help='Number of tests to run in parallel (default: CPU count)'
    )

    parser.add_argument(
        '--max-steps',
        type=int,
        default=MAX_STEPS,
        help=f'Retired instruction limit per test (default: {MAX_STEPS})'
    )

    parser.add_argument(
        '-o', '--trace-dir',
        default=None,
        metavar='DIR',
        help='Write an execution trace per test into DIR'
    )

    parser.add_argument(
        '--entry',
        type=lambda x: int(x, 16),
        default=None,
        help='Entry point (hex, e.g., 0x80000000)'
    )

    parser.add_argument(
        '--mem-base',
        type=lambda x: int(x, 16),
        default=None,
        help='Memory base address (hex, e.g., 0x80000000)'
    )

    parser.add_argument(
        '--mem-size',
        type=lambda x: int(x, 16),
        default=None,
        help='Memory size in bytes (hex, e.g., 0x4000)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Log ecall reports (-v) and per-test loading (-vv)'
    )

    args = parser.parse_args(argv)

    level = [logging.WARNING, logging.INFO, logging.DEBUG][min(args.verbose, 2)]
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    overrides = {}
    if args.entry is not None:
        overrides['entry_point'] = args.entry
    if args.mem_base is not None:
        overrides['mem_base'] = args.mem_base
    if args.mem_size is not None:
        overrides['mem_size'] = args.mem_size
    config = replace(SimConfig(), **overrides)

    tests = []
    if args.task_list:
        if not os.path.exists(args.task_list):
            print(f"Error: Task list file '{args.task_list}' not found")
            return 1
        tests.extend(read_task_list(args.task_list))
    for path in args.paths:
        if os.path.isdir(path):
            tests.extend(find_tests(path))
        else:
            tests.append(path)
    if not tests:
        print("Error: No tests to run")
        return 1

    results = run_tests(tests, config, args.max_steps, args.jobs, args.trace_dir)
    for result in results:
        print(report(result))

    failed = [r for r in results if not r.passed]
    print(f"{len(results) - len(failed)}/{len(results)} passed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
