"""Input validation — checks that the design prompt is a non-empty string before the loop starts."""


def validate_input(design_prompt: str) -> str:
    """Validate that the design prompt is a non-empty string.

    Returns the stripped input on success.
    Raises ValueError if input is empty or whitespace-only.
    """
    if not isinstance(design_prompt, str) or not design_prompt.strip():
        raise ValueError("Design prompt must be a non-empty string.")
    return design_prompt.strip()
