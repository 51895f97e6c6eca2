#!/usr/bin/env python3
"""
Random fuzzer for the domjson parser.
Generates documents in the domjson grammar, then optionally corrupts them,
and checks that the parser either succeeds with JSON-loadable output or
fails with MarkupError. Anything else is a crash.
"""

import argparse
import json
import random
import string
import sys
import time
import traceback

from domjson import VOID_ELEMENTS, DomJSON, MarkupError

TAGS = [
    "div", "span", "p", "a", "ul", "ol", "li", "table", "tr", "td", "h1", "h2",
    "section", "article", "header", "footer", "nav", "style", "script", "my-widget",
]
VOID_TAGS = sorted(VOID_ELEMENTS)

ATTRIBUTES = ["id", "class", "style", "href", "src", "alt", "title", "data-x", "aria-label"]

SPECIAL_CHARS = [
    '"', "'", "\\", "\t", "\n", "\r", "\x00", "\x01", "\x1f", "\x7f",
    "\u00a0", "\u2028", "\u200b", "\ufeff", "\u00e9", "\u2713", "/", "*", "-", ">", "&",
]

MUTATIONS = [
    "drop_char", "duplicate_char", "insert_special", "swap_tag_case", "truncate", "insert_lt",
]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def random_whitespace():
    ws = [" ", "\t", "\n", "\r", "\f", "\v", "\u00a0", "\u3000", ""]
    return "".join(random.choices(ws, k=random.randint(0, 4)))


def fuzz_text():
    parts = []
    for _ in range(random.randint(1, 6)):
        choice = random.random()
        if choice < 0.6:
            parts.append(random_string(1, 12))
        elif choice < 0.85:
            parts.append(random.choice(SPECIAL_CHARS).replace("<", ""))
        else:
            parts.append(random_whitespace())
    text = "".join(parts).replace("<", "")
    # An accidental '/*' would need a matching '*/'
    return text.replace("/*", "/ *")


def fuzz_comment():
    body = random_string(0, 15).replace("-->", "").replace("*/", "")
    if random.random() < 0.5:
        return f"/*{body}*/"
    return f"<!--{body}-->"


def fuzz_attribute():
    name = random.choice(ATTRIBUTES + [random_string(1, 8)])
    quote = random.choice(['"', "'"])
    value = "".join(c for c in fuzz_text() if c != quote)
    return f"{random_whitespace() or ' '}{name}={quote}{value}{quote}"


def fuzz_open_tag(tag):
    attrs = "".join(fuzz_attribute() for _ in range(random.randint(0, 4)))
    return f"<{tag}{attrs}{random_whitespace()}>"


def fuzz_nested_structure(depth=0, max_depth=8):
    """Generate a well-formed node sequence."""
    parts = []
    for _ in range(random.randint(0, 4)):
        choice = random.random()
        if choice < 0.35 and depth < max_depth:
            tag = random.choice(TAGS)
            inner = fuzz_nested_structure(depth + 1, max_depth)
            parts.append(f"{fuzz_open_tag(tag)}{inner}</{tag}>")
        elif choice < 0.5:
            parts.append(fuzz_open_tag(random.choice(VOID_TAGS)))
        elif choice < 0.65:
            parts.append(fuzz_comment())
        else:
            parts.append(fuzz_text())
        parts.append(random_whitespace())
    return "".join(parts)


def fuzz_deeply_nested():
    depth = random.randint(50, 2000)
    tag = random.choice(TAGS)
    return f"<{tag}>" * depth + fuzz_text() + f"</{tag}>" * depth


def mutate(html):
    if not html:
        return random.choice(["<", "</", "<!", "/*", "<!--", "<p", '<p id="'])
    mutation = random.choice(MUTATIONS)
    pos = random.randrange(len(html))
    if mutation == "drop_char":
        return html[:pos] + html[pos + 1 :]
    if mutation == "duplicate_char":
        return html[:pos] + html[pos] + html[pos:]
    if mutation == "insert_special":
        return html[:pos] + random.choice(SPECIAL_CHARS + ["<", "</", "/*", "<!--"]) + html[pos:]
    if mutation == "swap_tag_case":
        return html[:pos] + html[pos:].swapcase()
    if mutation == "truncate":
        return html[:pos]
    return html[:pos] + "<" + html[pos:]


def generate_fuzzed_html():
    """Generate a random document, corrupted roughly half of the time."""
    if random.random() < 0.1:
        html = fuzz_deeply_nested()
    else:
        html = fuzz_nested_structure()
    if random.random() < 0.5:
        for _ in range(random.randint(1, 3)):
            html = mutate(html)
    return html


# json.loads recurses twice per tree level (object and children list), so
# deeper trees are checked by counting serialized nodes instead.
JSON_LOAD_MAX_DEPTH = 300


def tree_depth(root):
    depth = 0
    stack = [(root, 1)]
    while stack:
        node, level = stack.pop()
        depth = max(depth, level)
        stack.extend((child, level + 1) for child in node.children)
    return depth


def check_output(doc, sort_attributes=False):
    output = doc.to_json(sort_attributes=sort_attributes)
    if tree_depth(doc.root) <= JSON_LOAD_MAX_DEPTH:
        json.loads(output)
        return
    # Node count forces a full walk of the tree
    expected = 1 + sum(1 for _ in doc.root.iter_descendants())
    found = output.count('"node_type": ')
    if found != expected or not output.endswith("}"):
        raise AssertionError(f"serialized {found} nodes, tree has {expected}")


def check_document(html):
    """Parse one document. Returns 'ok' or 'rejected'; raises on a crash."""
    try:
        doc = DomJSON(html)
    except MarkupError as e:
        if e.error.offset is None or not 0 <= e.error.offset <= len(html):
            raise AssertionError(f"error offset out of range: {e.error!r}") from e
        return "rejected"
    check_output(doc)
    check_output(doc, sort_attributes=True)
    return "ok"


def run_fuzzer(num_tests, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer against domjson."""
    if seed is not None:
        random.seed(seed)

    crashes = []
    hangs = []
    outcomes = {"ok": 0, "rejected": 0}

    print(f"Fuzzing domjson with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        html = generate_fuzzed_html()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            outcome = check_document(html)
            elapsed = time.perf_counter() - start
        except Exception as e:
            crashes.append({
                "test_num": i,
                "html": html,
                "error": f"{type(e).__name__}: {e}",
                "traceback": traceback.format_exc(),
            })
            if verbose:
                print(f"  CRASH: Test {i}: {e}")
            continue

        outcomes[outcome] += 1
        if elapsed > 5.0:
            hangs.append({"test_num": i, "html": html, "time": elapsed})
            if verbose:
                print(f"  HANG: Test {i} took {elapsed:.2f}s")

    elapsed_total = time.time() - start_time

    print(f"\n{'=' * 60}")
    print("FUZZING RESULTS: domjson")
    print(f"{'=' * 60}")
    print(f"Total tests:    {num_tests}")
    print(f"Parsed:         {outcomes['ok']}")
    print(f"Rejected:       {outcomes['rejected']}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Hangs (>5s):    {len(hangs)}")
    print(f"Total time:     {elapsed_total:.2f}s")
    print(f"Tests/second:   {num_tests / elapsed_total:.1f}")

    if crashes:
        print(f"\n{'=' * 60}")
        print("CRASH DETAILS:")
        print(f"{'=' * 60}")
        for crash in crashes[:10]:
            print(f"\nTest #{crash['test_num']}:")
            print(f"  HTML: {crash['html'][:200]!r}...")
            print(f"  Error: {crash['error']}")
        if len(crashes) > 10:
            print(f"\n... and {len(crashes) - 10} more crashes")

    if save_failures and (crashes or hangs):
        filename = f"fuzz_failures_domjson_{int(time.time())}.txt"
        with open(filename, "w", encoding="utf-8") as f:
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\n")
                f.write(f"HTML:\n{crash['html']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"HTML:\n{hang['html']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not crashes and not hangs


def main():
    parser = argparse.ArgumentParser(description="Fuzz the domjson parser with random and corrupted markup")
    parser.add_argument("--num-tests", "-n", type=int, default=1000, help="Number of test cases (default: 1000)")
    parser.add_argument("--seed", "-s", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--save-failures", action="store_true", help="Save failures to a file")
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed documents (no parsing)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed is not None:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i + 1} ===")
            print(generate_fuzzed_html())
            print()
        return

    success = run_fuzzer(args.num_tests, seed=args.seed, verbose=args.verbose, save_failures=args.save_failures)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
