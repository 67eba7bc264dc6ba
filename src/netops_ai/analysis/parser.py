"""Tolerant parsing of generated text into a verdict

Models wrap their JSON in chatter, truncate it, or skip it entirely. None of
that is an error here: anything that does not decode becomes a degraded
verdict asking for manual review.
"""

import json
import logging

from ..core.models import Verdict


MANUAL_REVIEW = "Manual review required"

VERDICT_FIELDS = ('severity', 'explanation', 'recommended_action')


def extract_first_json(text: str) -> str:
    """First balanced ``{...}`` substring, or an empty string"""
    start = text.find('{')
    if start == -1:
        return ""

    depth = 0
    for i in range(start, len(text)):
        char = text[i]
        if char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return ""


def parse_verdict(text: str) -> Verdict:
    clean = extract_first_json(text)
    if not clean:
        logging.warning("No JSON object in model output - returning degraded verdict")
        return Verdict.degraded(text, MANUAL_REVIEW)

    try:
        data = json.loads(clean)
    except ValueError:
        logging.warning("Model output JSON did not decode - returning degraded verdict")
        return Verdict.degraded(clean, MANUAL_REVIEW)

    if not isinstance(data, dict):
        return Verdict.degraded(clean, MANUAL_REVIEW)

    values = {}
    for name in VERDICT_FIELDS:
        value = data.get(name)
        if value is None:
            value = ""
        if not isinstance(value, str):
            logging.warning(f"Model output field '{name}' is not a string - returning degraded verdict")
            return Verdict.degraded(clean, MANUAL_REVIEW)
        values[name] = value

    logging.debug(f"Model response parsed successfully: severity={values['severity']}")
    return Verdict(**values)
