"""Prompts used by the chat pipeline."""

# Must stay byte-identical across requests
GROUNDED_ANSWER_PREAMBLE: str = (
    "Use the following context to answer clearly and concisely."
)

CONTEXT_HEADING: str = "Context:"
QUESTION_HEADING: str = "Question:"
