"""Prompt construction for event severity analysis"""

from ..core.models import Event, Severity


STOP_SEQUENCES = ["\n\nType:", "\n\nMessage:", "</System data>"]

_SEVERITY_CHOICES = "/".join(
    severity.value for severity in Severity if severity is not Severity.UNKNOWN
)

INSTRUCTIONS = f"""<Instructions>
Use the system data and the vulnerability context to answer the question.
Do NOT mention the system data, the vulnerability context, or how you derived the answer.
Respond with exactly one JSON object and nothing else, with the fields:
severity ({_SEVERITY_CHOICES}), explanation, recommended_action.
</Instructions>"""

QUESTION = """<Question>
What is the severity of the event and what action should be taken?
</Question>"""


def build_prompt(event: Event, context_block: str = "") -> str:
    """Compose the generation prompt; an empty context block is left out"""
    system_lines = [
        "<System data>",
        f"Event type: {event.type}",
        f"Event message: {event.message}",
    ]
    for name, value in event.source_metadata().items():
        system_lines.append(f"{name.replace('_', ' ').capitalize()}: {value}")
    system_lines.append("</System data>")

    sections = ["\n".join(system_lines)]
    if context_block:
        sections.append(context_block.rstrip("\n"))
    sections.append(INSTRUCTIONS)
    sections.append(QUESTION)
    return "\n\n".join(sections)
