#!/usr/bin/env python3
"""
Performance benchmark for domjson against other HTML parsers.

Documents come from a directory of *.html files (--dir) or, by default, from
the fuzzer's well-formed generator with a fixed seed. Files domjson rejects
are counted as errors for domjson only; the other parsers still see them.
"""

# ruff: noqa: BLE001, PLC0415
from __future__ import annotations

import argparse
import pathlib
import random
import sys
import time


def load_html_dir(html_dir: pathlib.Path, limit: int | None = None) -> list[tuple[str, str]]:
    """Load (filename, html_content) tuples from *.html files in a directory."""
    if not html_dir.exists():
        print(f"ERROR: Directory not found at {html_dir}")
        sys.exit(1)
    html_files = sorted(html_dir.glob("*.html"))
    if limit:
        html_files = html_files[:limit]
    return [(path.name, path.read_text(encoding="utf-8", errors="replace")) for path in html_files]


def generate_documents(count: int, seed: int) -> list[tuple[str, str]]:
    """Generate well-formed documents with the fuzzer's structure generator."""
    from fuzz import fuzz_nested_structure

    random.seed(seed)
    docs = []
    for index in range(count):
        body = "".join(fuzz_nested_structure(max_depth=10) for _ in range(20))
        docs.append((f"generated-{index:04d}.html", f"<html><body>{body}</body></html>"))
    return docs


def _time_parser(parse_fn, html_files: list, iterations: int, keep_error_files: bool = False) -> dict:
    times = []
    errors = 0
    error_files = []
    if html_files:
        try:
            parse_fn(html_files[0][1])
        except Exception:
            pass
    for _ in range(iterations):
        for filename, html in html_files:
            try:
                start = time.perf_counter()
                parse_fn(html)
                times.append(time.perf_counter() - start)
            except Exception as e:
                errors += 1
                if keep_error_files:
                    error_files.append((filename, str(e)))
    result = {
        "total_time": sum(times),
        "mean_time": sum(times) / len(times) if times else 0,
        "min_time": min(times) if times else 0,
        "max_time": max(times) if times else 0,
        "errors": errors,
        "success_count": len(times),
    }
    if keep_error_files:
        result["error_files"] = error_files
    return result


def benchmark_domjson(html_files: list, iterations: int = 1) -> dict:
    """Benchmark domjson: parse plus JSON serialization."""
    try:
        from domjson import DomJSON
    except ImportError:
        return {"error": "domjson not importable"}
    return _time_parser(lambda html: DomJSON(html).to_json(), html_files, iterations, keep_error_files=True)


def benchmark_html5lib(html_files: list, iterations: int = 1) -> dict:
    """Benchmark html5lib parser."""
    try:
        import html5lib
    except ImportError:
        return {"error": "html5lib not installed (pip install html5lib)"}
    return _time_parser(html5lib.parse, html_files, iterations)


def benchmark_lxml(html_files: list, iterations: int = 1) -> dict:
    """Benchmark lxml parser."""
    try:
        from lxml import html as lxml_html
    except ImportError:
        return {"error": "lxml not installed (pip install lxml)"}
    return _time_parser(lxml_html.fromstring, html_files, iterations)


def benchmark_bs4(html_files: list, iterations: int = 1) -> dict:
    """Benchmark BeautifulSoup4 parser."""
    try:
        from bs4 import BeautifulSoup
    except ImportError:
        return {"error": "beautifulsoup4 not installed (pip install beautifulsoup4)"}
    return _time_parser(lambda html: BeautifulSoup(html, "html.parser"), html_files, iterations)


def benchmark_html_parser(html_files: list, iterations: int = 1) -> dict:
    """Benchmark stdlib html.parser."""
    from html.parser import HTMLParser

    class SimpleHTMLParser(HTMLParser):
        def __init__(self):
            super().__init__()
            self.data = []

        def handle_starttag(self, tag, attrs):
            self.data.append(("start", tag, attrs))

        def handle_endtag(self, tag):
            self.data.append(("end", tag))

        def handle_data(self, data):
            self.data.append(("data", data))

    def parse(html):
        parser = SimpleHTMLParser()
        parser.feed(html)
        parser.close()
        return parser.data

    return _time_parser(parse, html_files, iterations)


BENCHMARKS = {
    "domjson": benchmark_domjson,
    "html5lib": benchmark_html5lib,
    "lxml": benchmark_lxml,
    "bs4": benchmark_bs4,
    "html.parser": benchmark_html_parser,
}


def print_results(results: dict, file_count: int, iterations: int = 1):
    """Pretty print benchmark results."""
    print("\n" + "=" * 80)
    if iterations > 1:
        print(f"BENCHMARK RESULTS ({file_count} documents x {iterations} iterations)")
    else:
        print(f"BENCHMARK RESULTS ({file_count} documents)")
    print("=" * 80)

    print(f"\n{'Parser':<15} {'Total (s)':<10} {'Mean (ms)':<10} {'Errors':<8}")
    print("-" * 80)

    domjson_time = results.get("domjson", {}).get("total_time", 0)

    for name, result in results.items():
        if "error" in result:
            print(f"{name:<15} {result['error']}")
            continue
        total = result["total_time"]
        speedup = ""
        if name != "domjson" and domjson_time > 0 and total > 0:
            speedup = f" ({total / domjson_time:.2f}x)"
        print(f"{name:<15} {total:<10.3f} {result['mean_time'] * 1000:<10.3f} {result['errors']:<8}{speedup}")

    print("\n" + "=" * 80)

    error_files = results.get("domjson", {}).get("error_files", [])
    if error_files:
        print("\nDocuments rejected by domjson:")
        for filename, error_msg in error_files[:20]:
            print(f"  {filename}: {error_msg}")
        if len(error_files) > 20:
            print(f"  ... and {len(error_files) - 20} more")
        print()


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark domjson against other HTML parsers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--dir", type=pathlib.Path, help="Directory of *.html files to parse")
    parser.add_argument(
        "--limit", type=int, default=100, help="Number of documents to use (default: 100, use 0 for all files)",
    )
    parser.add_argument("--seed", type=int, default=1234, help="Seed for generated documents (default: 1234)")
    parser.add_argument(
        "--iterations", type=int, default=5, help="Number of iterations to run for averaging (default: 5)",
    )
    parser.add_argument(
        "--parsers",
        nargs="+",
        choices=list(BENCHMARKS),
        default=list(BENCHMARKS),
        help="Parsers to benchmark (default: all)",
    )
    args = parser.parse_args()

    if args.dir:
        print(f"Loading HTML files from {args.dir}...")
        html_files = load_html_dir(args.dir, args.limit if args.limit > 0 else None)
    else:
        print(f"Generating {args.limit} documents (seed {args.seed})...")
        html_files = generate_documents(args.limit or 100, args.seed)
    if not html_files:
        print("ERROR: No HTML documents loaded")
        sys.exit(1)

    total_bytes = sum(len(html) for _, html in html_files)
    print(f"Loaded {len(html_files)} documents, {total_bytes / 1024:.1f} KB")

    results = {}
    for parser_name in args.parsers:
        print(f"\nBenchmarking {parser_name}...", end="", flush=True)
        res = BENCHMARKS[parser_name](html_files, args.iterations)
        results[parser_name] = res
        if "error" in res:
            print(f" SKIPPED ({res['error']})")
        else:
            print(f" DONE ({res['total_time']:.3f}s)")

    print_results(results, len(html_files), args.iterations)


if __name__ == "__main__":
    main()
