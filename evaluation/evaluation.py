#!/usr/bin/env python3
"""
Evaluation runner for the Huffman codec.

This evaluation script:
- Runs the pytest suite in tests/ and collects individual test results
- Benchmarks compress/decompress on synthetic datasets and verifies round trips
- Generates a structured JSON report with environment metadata

Run with:
    python evaluation/evaluation.py [--output PATH] [--skip-tests] [--sizes 1024,65536] [--seed 0]
"""
import os
import sys
import json
import uuid
import random
import platform
import subprocess
import time
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from huffman_core import HuffmanError  # noqa: E402
from huffman_service import HuffmanService  # noqa: E402

DEFAULT_SIZES = (1024, 64 * 1024)


def generate_run_id():
    """Generate a short unique run ID."""
    return uuid.uuid4().hex[:8]


def get_git_info():
    """Get git commit and branch information."""
    git_info = {"git_commit": "unknown", "git_branch": "unknown"}
    for key, cmd in (
        ("git_commit", ["git", "rev-parse", "HEAD"]),
        ("git_branch", ["git", "rev-parse", "--abbrev-ref", "HEAD"]),
    ):
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                cwd=str(PROJECT_ROOT),
                timeout=5,
            )
        except (OSError, subprocess.TimeoutExpired):
            continue
        if result.returncode == 0:
            value = result.stdout.strip()
            git_info[key] = value[:8] if key == "git_commit" else value
    return git_info


def get_environment_info():
    """Collect environment information for the report."""
    git_info = get_git_info()

    return {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "os": platform.system(),
        "os_release": platform.release(),
        "architecture": platform.machine(),
        "hostname": platform.node(),
        "git_commit": git_info["git_commit"],
        "git_branch": git_info["git_branch"],
    }


def run_pytest(tests_dir, timeout=300):
    """
    Run pytest on the tests/ folder.

    Args:
        tests_dir: Path to the tests directory
        timeout: Seconds before the run is abandoned

    Returns:
        dict with test results
    """
    print(f"\n{'=' * 60}")
    print("RUNNING TESTS")
    print(f"{'=' * 60}")
    print(f"Tests directory: {tests_dir}")

    cmd = [
        sys.executable, "-m", "pytest",
        str(tests_dir),
        "-v",
        "--tb=short",
    ]

    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH")]))

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            cwd=str(PROJECT_ROOT),
            env=env,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        print("❌ Test execution timed out")
        return _failed_run("Test execution timed out")
    except OSError as e:
        print(f"❌ Error running tests: {e}")
        return _failed_run(str(e))

    stdout = result.stdout
    stderr = result.stderr
    tests = parse_pytest_verbose_output(stdout)
    summary = summarize(tests)

    print(
        f"\nResults: {summary['passed']} passed, {summary['failed']} failed, "
        f"{summary['errors']} errors, {summary['skipped']} skipped (total: {summary['total']})"
    )
    for test in tests:
        status_icon = {
            "passed": "✅",
            "failed": "❌",
            "error": "💥",
            "skipped": "⏭️"
        }.get(test["outcome"], "❓")
        print(f"  {status_icon} {test['nodeid']}: {test['outcome']}")

    return {
        "success": result.returncode == 0,
        "exit_code": result.returncode,
        "tests": tests,
        "summary": summary,
        "stdout": stdout[-3000:],
        "stderr": stderr[-1000:],
    }


def _failed_run(message):
    return {
        "success": False,
        "exit_code": -1,
        "tests": [],
        "summary": {"error": message},
        "stdout": "",
        "stderr": "",
    }


OUTCOMES = {" PASSED": "passed", " FAILED": "failed", " ERROR": "error", " SKIPPED": "skipped"}


def parse_pytest_verbose_output(output):
    """Parse pytest verbose output to extract test results."""
    tests = []
    for line in output.splitlines():
        line = line.strip()

        # Match lines like: tests/test_huffman_core.py::test_single_symbol_gets_one_bit_code PASSED
        if "::" not in line:
            continue
        for status_word, outcome in OUTCOMES.items():
            if status_word in line:
                nodeid = line.split(status_word)[0].strip()
                tests.append({
                    "nodeid": nodeid,
                    "name": nodeid.split("::")[-1],
                    "outcome": outcome,
                })
                break
    return tests


def summarize(tests):
    counts = {outcome: 0 for outcome in OUTCOMES.values()}
    for test in tests:
        counts[test["outcome"]] += 1
    return {
        "total": len(tests),
        "passed": counts["passed"],
        "failed": counts["failed"],
        "errors": counts["error"],
        "skipped": counts["skipped"],
    }


# Synthetic datasets

def gen_uniform(size, rng):
    return bytes(rng.getrandbits(8) for _ in range(size))


def gen_repetitive(size, rng, dominant=ord("A"), dom_frac=0.90):
    others = [b for b in range(256) if b != dominant]
    return bytes(dominant if rng.random() < dom_frac else rng.choice(others) for _ in range(size))


def gen_english_like(size, rng):
    chars = " etaoinshrdlcumwfgypbvkjxq\n"
    weights = [13.0] + [6.0] * 12 + [2.5] * 10 + [1.2] * 3 + [1.5]
    return "".join(rng.choices(chars, weights=weights, k=size))


def gen_single_symbol(size, rng):
    return "a" * size


DATASETS = {
    "uniform256": gen_uniform,
    "repetitive90": gen_repetitive,
    "english_like": gen_english_like,
    "single_symbol": gen_single_symbol,
}


def measure(service, name, data):
    """Compress and decompress ``data`` once, returning timings and sizes."""
    t0 = time.perf_counter()
    blob = service.compress(data)
    t1 = time.perf_counter()
    restored = service.decompress(blob)
    t2 = time.perf_counter()

    stats = service.stats(data, blob)
    return {
        "dataset": name,
        "symbols": stats.symbol_count,
        "alphabet_size": stats.alphabet_size,
        "original_size": stats.original_size,
        "compressed_size": stats.compressed_size,
        "payload_bits": stats.payload_bits,
        "ratio": round(stats.ratio, 4),
        "compression_time_ms": round((t1 - t0) * 1000, 3),
        "decompression_time_ms": round((t2 - t1) * 1000, 3),
        "round_trip": restored == data,
    }


def run_benchmarks(sizes, seed):
    print(f"\n{'=' * 60}")
    print("RUNNING BENCHMARKS")
    print(f"{'=' * 60}")

    service = HuffmanService()
    rows = []
    for size in sizes:
        for name, generate in DATASETS.items():
            data = generate(size, random.Random(seed))
            try:
                row = measure(service, name, data)
            except HuffmanError as e:
                row = {"dataset": name, "symbols": size, "round_trip": False, "error": str(e)}
            rows.append(row)
            status_icon = "✅" if row["round_trip"] else "❌"
            print(
                f"  {status_icon} {name} ({size} symbols): "
                f"ratio {row.get('ratio', 'n/a')}, "
                f"compress {row.get('compression_time_ms', 'n/a')} ms"
            )

    return {
        "success": all(row["round_trip"] for row in rows),
        "seed": seed,
        "rows": rows,
    }


def generate_output_path():
    """Generate output path in format: evaluation/YYYY-MM-DD/HH-MM-SS/report.json"""
    now = datetime.now()
    output_dir = PROJECT_ROOT / "evaluation" / now.strftime("%Y-%m-%d") / now.strftime("%H-%M-%S")
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / "report.json"


def parse_sizes(value):
    return tuple(int(part) for part in value.split(",") if part.strip())


def main():
    """Main entry point for evaluation."""
    import argparse

    parser = argparse.ArgumentParser(description="Run the Huffman codec evaluation")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output JSON file path (default: evaluation/YYYY-MM-DD/HH-MM-SS/report.json)"
    )
    parser.add_argument("--skip-tests", action="store_true", help="Only run the benchmarks")
    parser.add_argument(
        "--sizes",
        type=parse_sizes,
        default=DEFAULT_SIZES,
        help="Comma-separated dataset sizes in symbols (default: 1024,65536)"
    )
    parser.add_argument("--seed", type=int, default=0, help="Seed for the synthetic datasets")

    args = parser.parse_args()

    run_id = generate_run_id()
    started_at = datetime.now()

    print(f"Run ID: {run_id}")
    print(f"Started at: {started_at.isoformat()}")

    tests = None if args.skip_tests else run_pytest(PROJECT_ROOT / "tests")
    try:
        benchmarks = run_benchmarks(args.sizes, args.seed)
        error_message = None
    except Exception as e:
        import traceback
        print(f"\nERROR: {str(e)}")
        traceback.print_exc()
        benchmarks = None
        error_message = str(e)

    success = (
        benchmarks is not None
        and benchmarks["success"]
        and (tests is None or tests["success"])
    )
    if error_message is None and not success:
        error_message = "Tests or round-trip checks failed"

    finished_at = datetime.now()
    duration = (finished_at - started_at).total_seconds()

    report = {
        "run_id": run_id,
        "started_at": started_at.isoformat(),
        "finished_at": finished_at.isoformat(),
        "duration_seconds": round(duration, 6),
        "success": success,
        "error": error_message,
        "environment": get_environment_info(),
        "results": {
            "tests": tests,
            "benchmarks": benchmarks,
        },
    }

    output_path = Path(args.output) if args.output else generate_output_path()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        json.dump(report, f, indent=2)
    print(f"\n✅ Report saved to: {output_path}")

    print(f"\n{'=' * 60}")
    print("EVALUATION COMPLETE")
    print(f"{'=' * 60}")
    print(f"Run ID: {run_id}")
    print(f"Duration: {duration:.2f}s")
    print(f"Success: {'✅ YES' if success else '❌ NO'}")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
