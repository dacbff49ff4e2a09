"""Quickstart example for scopecss.

This example demonstrates scoping a stylesheet to one HTML fragment.

Note: Examples pass a seeded random.Random so the printed keys are
repeatable. In production, omit rng and let each call draw a fresh key.
"""

import random

from scopecss import CssParseError, rewrite_css, scope, scope_css, tag_html
from scopecss.diagnostics import DiagnosticFormatter, OutputFormat

rng = random.Random(2024)

# Example 1: Scope a fragment and its stylesheet
print("=" * 50)
print("Example 1: scope_css()")
print("=" * 50)

html = '<div class="button">Click me</div>'
css = ".button { color: red; }"

print(scope_css(html, css, rng=rng))
# Output: <div class="button" data-scope="...">Click me</div><style>:where([data-scope="..."]) .button { color: red; }</style>

# Example 2: Keep the parts separate
print("\n" + "=" * 50)
print("Example 2: scope() returns key, html and css")
print("=" * 50)

result = scope(
    "<nav><a class='active' href='/'>Home</a></nav>",
    "nav > a.active, nav a:hover { text-decoration: underline; }",
    rng=rng,
)
print(f"key:  {result.key}")
print(f"html: {result.html}")
print(f"css:  {result.css}")

# Example 3: Group rules are rewritten, keyframes are not
print("\n" + "=" * 50)
print("Example 3: @media and @keyframes")
print("=" * 50)

print(rewrite_css(
    """
@media (max-width: 600px) { .card { padding: 0; } }
@keyframes fade { from { opacity: 0; } to { opacity: 1; } }
.card { animation: fade 1s; }
""",
    "demo01",
))

# Example 4: Tag HTML on its own
print("\n" + "=" * 50)
print("Example 4: tag_html() with a custom attribute")
print("=" * 50)

print(tag_html("<ul><li>one</li><li>two</li></ul>", "demo01", attribute="data-v"))
# Output: <ul data-v="demo01"><li data-v="demo01">one</li><li data-v="demo01">two</li></ul>

# Example 5: Errors carry a position
print("\n" + "=" * 50)
print("Example 5: CssParseError")
print("=" * 50)

try:
    scope_css("<p>x</p>", ".ok { color: red; }\n.broken..selector { color: blue; }", rng=rng)
except CssParseError as e:
    print(f"line {e.line}, column {e.column}")
    print(e)
    if e.diagnostic is not None:
        print(DiagnosticFormatter(output_format=OutputFormat.JSON).format(e.diagnostic))
