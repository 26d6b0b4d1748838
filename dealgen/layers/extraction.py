"""
Structured output extraction for model responses.

Models are asked for bare JSON but often wrap it in prose or code fences.
The extractor first tries a strict parse of the whole text, then slices
between the outermost delimiters of the expected shape and parses that.
Without an expected shape, any object or array is accepted and the slice
starts at whichever delimiter appears first.
A stray brace or bracket in the surrounding prose can still defeat the
slice; that case surfaces as MalformedOutput.
"""
import json
from typing import Any, Optional, Union

from dealgen.errors import MalformedOutput


SHAPES = {
    "object": ("{", "}", dict),
    "array": ("[", "]", list),
}


def extract(text: str, shape: Optional[str] = None) -> Union[dict, list]:
    """
    Extract a JSON object or array from free-form model output.

    Args:
        text: Raw model output
        shape: "object" or "array" to require that top-level shape,
            None to accept either

    Returns:
        The parsed dict or list

    Raises:
        MalformedOutput: No parsable payload of the expected shape
    """
    if shape is not None and shape not in SHAPES:
        raise ValueError(f"Unsupported shape: {shape}")
    expected_types = (SHAPES[shape][2],) if shape else (dict, list)
    label = shape or "value"

    if not text or not text.strip():
        raise MalformedOutput("Model returned empty output")

    parsed = _strict_parse(text.strip())
    if isinstance(parsed, expected_types):
        return parsed

    opening, closing = _delimiters(text, shape)
    start = text.find(opening)
    end = text.rfind(closing)
    if start == -1 or end == -1 or end <= start:
        raise MalformedOutput(f"No JSON {label} delimiters found in model output")

    parsed = _strict_parse(text[start:end + 1])
    if not isinstance(parsed, expected_types):
        raise MalformedOutput(f"Could not parse a JSON {label} from model output")
    return parsed


def _delimiters(text: str, shape: Optional[str]):
    if shape:
        return SHAPES[shape][:2]
    # first delimiter in the text decides the shape
    positions = {
        name: text.find(opening)
        for name, (opening, _, _) in SHAPES.items()
        if opening in text
    }
    if not positions:
        return SHAPES["object"][:2]
    return SHAPES[min(positions, key=positions.get)][:2]


def _strict_parse(candidate: str) -> Any:
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        return None
