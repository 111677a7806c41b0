"""
Prompt builder for CodeSense.

Assembles the opening messages of an exchange from repository metadata.
Both builders are pure: no I/O, deterministic for the same inputs.
"""

import json
import logging
from typing import Any

from codesense.providers.models import Message, Role
from codesense.repository import RepositoryMetadata
from codesense.tools.file_content import FILE_CONTENT_TOOL_NAME

logger = logging.getLogger(__name__)

ASSISTANT_NAME = "CodeSense"

CHAT_ACKNOWLEDGEMENT = "Understood. I'm ready to help with this repository. What's your question?"

SUMMARY_INSTRUCTIONS = """\
You are {assistant}, an AI assistant specialized in analyzing GitHub repositories.
Analyze this GitHub repository information:
{context}

Your task is to provide a comprehensive summary. If needed, use the '{tool}' function \
to inspect up to {max_files} key files to deepen your analysis.

Your final analysis should be in Markdown format and include:
1. Overall purpose and main functionality.
2. Key architectural patterns and code organization.
3. Main technologies used and their roles.
4. Important features and components (highlighting those from browsed files if any).
5. Potential use cases.
Keep it factual, detailed, and developer-focused."""

CHAT_INSTRUCTIONS = """\
You are {assistant}, an AI assistant helping a developer with the GitHub repository: {name}.
Repository Context (abbreviated):
Name: {name}
Description: {description}
Primary Language: {language}
Key Files (first few): {key_files}

The user will ask questions. Review the CHAT HISTORY and the current QUESTION.
If necessary to answer, use the '{tool}' function to inspect up to {max_files} files.
Be concise and helpful."""


def summary_context(
    metadata: RepositoryMetadata,
    max_entries: int = 50,
    max_languages: int = 5,
) -> dict[str, Any]:
    """Bounded projection of the metadata used by summary prompts and fallbacks."""
    return {
        "name": metadata.full_name,
        "description": metadata.description,
        "primaryLanguage": metadata.language,
        "stars": metadata.stars,
        "forks": metadata.forks,
        "openIssues": metadata.open_issues,
        "topics": list(metadata.topics),
        "availableFiles": [
            {"path": entry.path, "type": entry.type, "size": entry.size}
            for entry in metadata.entries[:max_entries]
        ],
        "detectedLanguages": [language.name for language in metadata.languages[:max_languages]],
        "contributorsCount": len(metadata.contributors),
    }


def chat_context(
    metadata: RepositoryMetadata,
    max_entries: int = 30,
    max_languages: int = 5,
) -> dict[str, Any]:
    """Bounded projection of the metadata used by chat prompts."""
    return {
        "name": metadata.full_name,
        "description": metadata.description,
        "primaryLanguage": metadata.language,
        "availableFiles": [
            {"path": entry.path, "type": entry.type, "size": entry.size}
            for entry in metadata.entries[:max_entries]
        ],
        "detectedLanguages": [language.name for language in metadata.languages[:max_languages]],
    }


def build_summary_prompt(
    metadata: RepositoryMetadata,
    max_files: int = 3,
    max_entries: int = 50,
    max_languages: int = 5,
) -> Message:
    """
    Build the single requester message opening a summary exchange.

    Args:
        metadata: Repository metadata.
        max_files: Files the model may request through the tool (K).
        max_entries: Top-level entries included in the projection.
        max_languages: Detected languages included in the projection.

    Returns:
        Requester message asking for a five-section Markdown analysis.
    """
    context = summary_context(metadata, max_entries, max_languages)
    prompt = SUMMARY_INSTRUCTIONS.format(
        assistant=ASSISTANT_NAME,
        context=json.dumps(context, indent=2),
        tool=FILE_CONTENT_TOOL_NAME,
        max_files=max_files,
    )
    return Message.requester(prompt)


def build_chat_prompt(
    metadata: RepositoryMetadata,
    prior_turns: list[Message],
    question: str,
    max_history_pairs: int = 10,
    max_files: int = 3,
    max_entries: int = 30,
    key_files: int = 5,
    max_languages: int = 5,
) -> list[Message]:
    """
    Build the conversation opening a chat turn.

    The result is: system instruction (requester), canned acknowledgement
    (model), the last ``2 * max_history_pairs`` prior turns, then the
    question. Older history is dropped, not summarized.

    Args:
        metadata: Repository metadata.
        prior_turns: Earlier requester/model messages, oldest first.
        question: The user's question, wrapped verbatim.
        max_history_pairs: Recent exchange pairs to keep (N).
        max_files: Files the model may request through the tool (K).
        max_entries: Top-level entries in the context projection.
        key_files: Entries named in the instruction text.
        max_languages: Detected languages in the context projection.

    Returns:
        Ordered messages for the backend.
    """
    context = chat_context(metadata, max_entries, max_languages)
    key_file_paths = [entry["path"] for entry in context["availableFiles"][:key_files]]

    instruction = CHAT_INSTRUCTIONS.format(
        assistant=ASSISTANT_NAME,
        name=context["name"],
        description=context["description"] or "N/A",
        language=context["primaryLanguage"] or "N/A",
        key_files=", ".join(key_file_paths) or "N/A",
        tool=FILE_CONTENT_TOOL_NAME,
        max_files=max_files,
    )

    history_limit = max_history_pairs * 2
    history = list(prior_turns[-history_limit:]) if history_limit > 0 else []
    if len(prior_turns) > len(history):
        logger.debug(f"Dropped {len(prior_turns) - len(history)} older chat message(s)")

    return [
        Message.requester(instruction),
        Message.model(CHAT_ACKNOWLEDGEMENT),
        *history,
        Message.requester(f"QUESTION: {question}"),
    ]


def turns_from_client_history(entries: list[dict[str, Any]]) -> list[Message]:
    """
    Convert chat UI records into prior turns.

    Args:
        entries: Records shaped ``{"sender": "user" | "bot", "content": str}``.

    Returns:
        Requester messages for user entries, model messages for the rest.
    """
    turns = []
    for entry in entries:
        role = Role.REQUESTER if entry.get("sender") == "user" else Role.MODEL
        text = str(entry.get("content") or "")
        turns.append(Message.requester(text) if role == Role.REQUESTER else Message.model(text))
    return turns
