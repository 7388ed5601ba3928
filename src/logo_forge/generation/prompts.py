"""Prompt wrapping for logo generation."""

LOGO_INSTRUCTIONS = (
    "The logo should be clean, memorable, and suitable for business use. "
    "Use high contrast colors, clear typography if text is included, and ensure "
    "the design works well at different sizes. Style: modern and professional. "
    "Format: square logo suitable for business applications. IMPORTANT: Do not "
    "include any taglines, slogans, or descriptive text below the logo - only the "
    "business name and/or icon elements."
)

REFINEMENT_INSTRUCTIONS = (
    "Keep the exact same design, layout, typography, and structure as shown in the "
    "provided image. Apply only the specific changes requested while preserving "
    "everything else identical to the reference image."
)


def enhance_prompt(prompt: str, has_reference: bool = False) -> str:
    """Wrap a user prompt with the logo-quality instructions sent to the model.

    With a reference image the request is a refinement of that image, so the
    generic instructions are replaced by "change only what was asked".
    """
    prompt = prompt.strip().rstrip(".")
    if has_reference:
        return f"{prompt}. {REFINEMENT_INSTRUCTIONS}"
    return (
        "Create a professional, high-quality logo design. "
        f"{prompt}. {LOGO_INSTRUCTIONS}"
    )
