"""
Build script for domjson with optional mypyc compilation.

Usage:
    # Pure Python build (default)
    pip install .

    # Compiled with mypyc
    DOMJSON_USE_MYPYC=1 pip install .
"""

import os
import sys
from pathlib import Path

from setuptools import find_packages, setup

# Determine if we should use mypyc
USE_MYPYC = os.environ.get("DOMJSON_USE_MYPYC", "0") == "1"

# Hot path: character scanning, grammar and serialization.
# node.py stays interpreted; its payload classes share a `kind` class attribute
# that mypyc does not model well.
MYPYC_MODULES = [
    "src/domjson/scanner.py",
    "src/domjson/parser.py",
    "src/domjson/serialize.py",
]


def build_with_mypyc() -> list:
    """Build extension modules using mypyc."""
    try:
        from mypyc.build import mypycify
    except ImportError:
        print(
            "ERROR: mypyc is not installed. Install with: pip install mypy",
            file=sys.stderr,
        )
        print("Or install with mypyc support: pip install domjson[mypyc]", file=sys.stderr)
        sys.exit(1)

    for module_path in MYPYC_MODULES:
        if not Path(module_path).exists():
            print(f"ERROR: Module not found: {module_path}", file=sys.stderr)
            sys.exit(1)

    print(f"Compiling {len(MYPYC_MODULES)} modules with mypyc:")
    for module in MYPYC_MODULES:
        print(f"  - {module}")

    mypyc_options = {
        "opt_level": os.environ.get("MYPYC_OPT_LEVEL", "3"),
        "debug_level": os.environ.get("MYPYC_DEBUG_LEVEL", "0"),
        "verbose": True,
        "separate": False,
        "multi_file": False,
    }

    return mypycify(MYPYC_MODULES, **mypyc_options)


if __name__ == "__main__":
    ext_modules = build_with_mypyc() if USE_MYPYC else []

    setup(
        name="domjson",
        version="0.1.0",
        description="Small markup parser that builds a DOM tree and renders it as JSON",
        python_requires=">=3.9",
        package_dir={"": "src"},
        packages=find_packages("src"),
        ext_modules=ext_modules,
        entry_points={"console_scripts": ["domjson=domjson.__main__:main"]},
        extras_require={
            "test": ["pytest"],
            "benchmark": ["html5lib", "lxml", "beautifulsoup4"],
            "mypyc": ["mypy"],
        },
    )
