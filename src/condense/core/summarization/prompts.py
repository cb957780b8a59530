"""Prompt templates for chunk summarization."""

from __future__ import annotations

from .models import CompressionLevel

COMPRESSION_PROMPTS: dict[CompressionLevel, str] = {
    CompressionLevel.DETAILED: (
        "You are a highly skilled document summarizer. Create a comprehensive summary that:\n"
        "1. Preserves all key information, concepts, and insights\n"
        "2. Maintains the logical structure and flow of ideas\n"
        "3. Includes important technical details, examples, and explanations\n"
        "4. Uses clear, professional language\n"
        "5. Focuses on essential content while removing redundancy\n"
        "\n"
        "Create a detailed summary that captures the full depth of the content."
    ),
    CompressionLevel.BALANCED: (
        "You are a skilled document summarizer. Create a concise summary that:\n"
        "1. Focuses on the main ideas and key points\n"
        "2. Maintains logical flow and structure\n"
        "3. Includes important context and supporting details\n"
        "4. Uses clear, professional language\n"
        "5. Balances comprehensiveness with brevity\n"
        "\n"
        "Create a balanced summary that covers core content without excessive detail."
    ),
    CompressionLevel.AGGRESSIVE: (
        "You are an expert document summarizer. Create a very brief summary that:\n"
        "1. Captures only the most critical information\n"
        "2. Focuses on essential facts and conclusions\n"
        "3. Removes all non-essential details and examples\n"
        "4. Uses clear, concise language\n"
        "5. Maximizes information density\n"
        "\n"
        "Create an ultra-concise summary with maximum compression."
    ),
}


def get_system_prompt(level: CompressionLevel) -> str:
    return COMPRESSION_PROMPTS[level]


def build_chunk_prompt(chunk: str, topic: str, chunk_number: int, total_chunks: int) -> str:
    """Build the user prompt for one chunk.

    Args:
        chunk: Chunk text
        topic: Document topic
        chunk_number: 1-based position of the chunk
        total_chunks: Number of chunks in this iteration
    """
    return (
        f"Document topic: {topic}\n\n"
        f"This is chunk {chunk_number} of {total_chunks}.\n\n"
        f"Please summarize the following text:\n\n"
        f"{chunk}"
    )
