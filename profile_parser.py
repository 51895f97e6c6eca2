#!/usr/bin/env python3
"""Profile domjson parsing and serialization to find bottlenecks."""

import cProfile
import io
import pstats

from domjson import DomJSON

# Sample document
html = """
<html>
<head><meta charset="utf-8"><title>Test</title><style>/* reset */ body { margin: 0 }</style></head>
<body>
    <div class="container" id="main">
        <p>Paragraph 1</p>
        <!-- comment -->
        <p>Paragraph 2 with <a href="/x">a link</a></p>
        <ul>
            <li>Item 1</li><li>Item 2</li><li>Item 3</li>
        </ul>
        <img src="a.png" alt='an "image"'>
    </div>
</body>
</html>
""" * 100  # Repeat for more meaningful results

# Profile
pr = cProfile.Profile()
pr.enable()

for _ in range(10):
    result = DomJSON(html)
    _ = result.to_json()

pr.disable()

# Print stats
s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(50)  # Top 50 functions
print(s.getvalue())
