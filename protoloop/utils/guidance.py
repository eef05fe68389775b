"""Distilled UI component guidance for injection into code-generation prompts."""

# Imperative rules for LLM consumption. Shared by the generator and improver
# so a revision never drops a rule the first draft followed.
_GUIDANCE_RULES = """\
- Give every interactive control a visible focus style and an accessible name \
(text content, aria-label, or an associated <label>).
- Use exactly one <h1> and keep heading levels sequential.
- Every <img> needs alt text; decorative images use alt="".
- Disable or hide controls that cannot act yet instead of letting clicks do nothing.
- Show empty, loading, and error states explicitly rather than rendering nothing.
- Keep state local with hooks; no network calls, routers, or external stores.
- Keep colour contrast at WCAG AA or better and use consistent Tailwind spacing.\
"""


def load_guidance(config: dict) -> str:
    """Return the distilled UI guidance rules.

    Returns an empty string if guidance is disabled in config
    (set guidance_enabled to false or remove it).
    """
    if not config.get("guidance_enabled", False):
        return ""

    return _GUIDANCE_RULES
