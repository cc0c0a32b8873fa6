"""Builds the grounded prompt sent to the language model."""

from typing import Iterable

from kbproxy.conf.prompts import (
    CONTEXT_HEADING,
    GROUNDED_ANSWER_PREAMBLE,
    QUESTION_HEADING,
)


def compose_prompt(query: str, chunks: Iterable[str]) -> str:
    """Compose a prompt that grounds the answer in retrieved chunks.

    The result is a pure function of its inputs: the same query and chunks
    always produce byte-identical prompts.

    Args:
        query: User query, inserted verbatim
        chunks: Chunk contents in retrieval order

    Returns:
        The preamble, the trimmed chunks separated by one blank line, and the
        query under its own heading
    """
    context = "\n\n".join(chunk.strip() for chunk in chunks)
    return (
        f"{GROUNDED_ANSWER_PREAMBLE}\n\n"
        f"{CONTEXT_HEADING}\n{context}\n\n"
        f"{QUESTION_HEADING}\n{query}"
    )
