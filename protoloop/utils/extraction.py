"""Code-block extraction: turns a code-generation reply into bare module source."""

import re

_FENCE_OPEN_RE = re.compile(r"^```[\w+-]*[ \t]*\n")
_FENCE_CLOSE_RE = re.compile(r"\n[ \t]*```$")

# From the first line starting with `import` to the last default export.
# The export is either a one-line statement (`export default Foo;`) or an
# inline declaration (`export default function Foo() { ... }`).
_MODULE_SPAN_RE = re.compile(
    r"^(import\b[\s\S]*export\s+default\s+"
    r"(?:(?:async\s+)?(?:function|class)\b[\s\S]*\}|[^;\n]+;?))",
    re.MULTILINE,
)


def extract_code(text: str) -> str:
    """Strip fences and surrounding prose from a generated component.

    Falls through to the fence-stripped text when no import/export span is
    found; the dev server's compile errors surface anything still wrong.
    Running it on its own output returns the same string.
    """
    code = (text or "").strip()
    # Models sometimes wrap an already fenced block in a second fence.
    while True:
        unfenced = _FENCE_OPEN_RE.sub("", code, count=1)
        unfenced = _FENCE_CLOSE_RE.sub("", unfenced, count=1).strip()
        if unfenced == code:
            break
        code = unfenced

    match = _MODULE_SPAN_RE.search(code)
    if match:
        code = match.group(1)
    return code.strip()
