"""Verbose (extended thinking) prompt augmentation for chat collaborators."""

from __future__ import annotations

from typing import Any

from agent_rewind_engine.permissions import PermissionContext

VERBOSE_SYSTEM_PROMPT = """

## Extended Thinking Mode

You are currently in extended thinking mode. When responding:

1. **Show Your Reasoning**: Explain your thought process step-by-step
2. **Break Down Complex Tasks**: Decompose problems into smaller steps
3. **Explain Decisions**: Justify why you chose a particular approach
4. **Consider Alternatives**: Mention other options you considered

Structure your responses with:
- **Analysis**: What you understand about the task
- **Approach**: Your planned solution strategy
- **Implementation**: The actual solution
- **Validation**: How you verified correctness"""


def augment_messages_for_verbose(
    messages: list[dict[str, Any]],
    permissions: PermissionContext,
) -> list[dict[str, Any]]:
    """
    Return *messages* with the verbose instructions added when verbose is on.

    The instructions are appended to the first system message, or a new
    system message is prepended. The input list is never modified.
    """
    if not permissions.is_verbose():
        return messages

    for idx, message in enumerate(messages):
        if message.get("role") == "system":
            updated = list(messages)
            updated[idx] = {
                **message,
                "content": (message.get("content") or "") + VERBOSE_SYSTEM_PROMPT,
            }
            return updated

    return [{"role": "system", "content": VERBOSE_SYSTEM_PROMPT.lstrip()}, *messages]


def format_verbose_response(response: str, permissions: PermissionContext) -> str:
    if not permissions.is_verbose():
        return response
    return f"\n[extended thinking]\n\n{response}\n"
