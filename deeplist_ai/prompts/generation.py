"""Instruction prompts for tool-submission content generation.

Each builder returns the instruction text for one form field. When the field
already has content the instruction asks the model to enhance it, otherwise
to create it from the rest of the draft.
"""

from typing import Sequence

from deeplist_ai.domain.models import Message, ToolDraft


def description_instruction(draft: ToolDraft) -> str:
    existing = draft.description.strip()
    if existing:
        return f"""You are enhancing a short description for an AI tool called "{draft.name.strip()}".

The current description is: "{existing}"

Improve this description while keeping its core meaning. The description should:
1. Be concise (1-2 sentences maximum)
2. Clearly explain what the tool does and its main benefit
3. Be compelling and user-focused
4. Use simple, direct language
5. No markdown formatting
6. Return ONLY ONE description, not multiple options
7. Do not include option numbers, bullet points, or "Option X:" prefixes

Return ONLY the improved description with no additional commentary or formatting."""
    return f"""You are creating a short description for an AI tool called "{draft.name.strip()}".

Create a brief, compelling description that explains what the tool does. The description should:
1. Be concise (1-2 sentences maximum)
2. Clearly explain what the tool does and its main benefit
3. Be compelling and user-focused
4. Use simple, direct language
5. No markdown formatting
6. Return ONLY ONE description, not multiple options
7. Do not include option numbers, bullet points, or "Option X:" prefixes
8. Do not use word 'AI' or 'AI assistant'

Return ONLY the description with no additional commentary or formatting."""


def prompt_instruction(draft: ToolDraft) -> str:
    existing = draft.prompt.strip()
    if existing:
        return f"""You are enhancing AI instructions for a tool called "{draft.name.strip()}".

The current AI instructions are: "{existing}"

Improve these instructions while keeping their core meaning. The result should be:
- A single paragraph that starts with "You are..."
- Focus only on the purpose of the AI
- Do not include separate sections for capabilities, tone, style, constraints, or scenarios
- Do not use word 'AI' or 'AI assistant'

Return ONLY the improved instructions with no additional commentary or formatting."""
    return f"""You are creating AI instructions for a tool called "{draft.name.strip()}".

Create a single paragraph of instructions that starts with "You are..." and focuses only on the purpose of the AI.
Do not include separate sections for capabilities, tone, style, constraints, or scenarios.

Return ONLY the instructions with no additional commentary or formatting."""


def name_instruction(draft: ToolDraft) -> str:
    existing = draft.name.strip()
    description = draft.description.strip()
    described = f'The tool\'s description is: "{description}"' if description else ""
    if existing:
        return f"""You are enhancing a name for an AI tool.

The current name is: "{existing}"
{described}

Improve this name while keeping its core meaning. The name should:
1. Be concise and catchy (1-4 words maximum)
2. Clearly relate to the tool's purpose
3. Be memorable and easy to pronounce
4. Don't combine words, space each word
5. No markdown or special characters
6. One tool name only

Return ONLY the improved name with no additional commentary or formatting.

(IMPORTANT: 1-4 words maximum output words)"""
    return f"""You are creating a name for an AI tool.
{described or "This is a new AI tool being created."}

Create a brief, compelling name for this AI tool. The name should:
1. Be concise and catchy (1-4 words maximum)
2. Clearly relate to the tool's purpose
3. Be memorable and easy to pronounce
4. Don't combine words, space each word
5. No markdown or special characters
6. One tool name only
7. Do not use word 'AI' or 'AI assistant'

Return ONLY the name with no additional commentary or formatting.

(IMPORTANT: 1-4 words maximum output words)"""


def initial_message_instruction(draft: ToolDraft) -> str:
    existing = draft.initial_message.strip()
    if existing:
        return f"""You are enhancing an initial welcome message for an AI tool called "{draft.name.strip()}".
The AI's instructions are: {draft.prompt.strip()}

The current welcome message is: "{existing}"

Improve this welcome message while keeping its core meaning. The message should:
1. Be concise (2-3 sentences maximum)
2. Explain what the tool does in simple terms
3. Invite the user to start interacting
4. Be conversational and engaging

IMPORTANT: Return ONLY the welcome message itself with no prefixes, explanations, or formatting. Do not include phrases like "Here is the welcome message:" or any other commentary. Just return the message text directly."""
    return f"""You are creating an initial welcome message for an AI tool called "{draft.name.strip()}".
The AI's instructions are: {draft.prompt.strip()}

Create a brief, friendly welcome message that introduces the AI tool to users. The message should:
1. Be concise (2-3 sentences maximum)
2. Explain what the tool does in simple terms
3. Invite the user to start interacting
4. Be conversational and engaging
5. Do not use word 'AI' or 'AI assistant'

Return ONLY the welcome message itself with no prefixes, explanations, or formatting. Do not include phrases like "Here is the welcome message:" or any other commentary. Just return the message text directly."""


def suggestion_instruction(
    history: Sequence[Message],
    last_assistant_message: str,
    count: int = 3,
) -> str:
    """Follow-up suggestion request built from the last three history messages."""

    context_lines = "\n".join(f"{m.role}: {m.content}" for m in list(history)[-3:])
    return f"""Based on this conversation context:
{context_lines}

The last assistant message was: "{last_assistant_message}"

Generate exactly {count} natural follow-up suggestions. Return ONLY a valid JSON object with no additional text:

{{
  "suggestions": ["suggestion 1", "suggestion 2", "suggestion 3"]
}}"""
