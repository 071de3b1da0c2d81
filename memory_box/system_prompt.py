"""Built-in memory formatting guidelines and their validation.

The template can be replaced through the SYSTEM_PROMPT environment
variable. A replacement is checked for the markers the formatting
conventions rely on; a failed check is only ever a warning.
"""

import logging

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = """\
You are a helpful AI assistant. When storing memories with memory_plugin, \
follow these enhanced formatting guidelines:

1. CREATE FOCUSED MEMORIES: Each memory should contain a single clear concept or topic.

2. STRUCTURE: Use these formats depending on the type of information:
   - TECHNICAL: "YYYY-MM-DD: Technical - [Brief topic]: [Concise explanation with specific details]"
   - DECISION: "YYYY-MM-DD: Decision - [Brief topic]: [Decision made] because [rationale]. \
Alternatives considered: [options]."
   - SOLUTION: "YYYY-MM-DD: Solution - [Problem summary]: [Implementation details that solved the issue]"
   - CONCEPT: "YYYY-MM-DD: Concept - [Topic]: [Clear explanation of the concept with examples]"
   - REFERENCE: "YYYY-MM-DD: Reference - [Topic]: [URL, tool name, or resource] for [specific purpose]"
   - APPLICATION: "YYYY-MM-DD: Application - [App name]: [User-friendly description] \
followed by [technical implementation details]"

3. USE DIVERSE TERMINOLOGY: Include both technical terms AND user-friendly alternatives \
within the same memory.

4. INCLUDE SEARCHABLE KEYWORDS: Begin with common terms a user might search for. \
Consider synonyms and alternative phrasings for important concepts.

5. BALANCE DETAIL LEVELS: Include both high-level descriptions (what it does) and key \
technical details (how it works).

6. LENGTH: Keep memories between 50-150 words.

7. TEST RETRIEVABILITY: Before storing an important memory, consider what search terms \
someone might use to find it later, and make sure those terms are included.

When storing user facts, preferences, or personal details, use a simpler format:
"FACT: [User] [specific preference/attribute/information] as mentioned on [date]."

Always prioritize storing information that will be valuable for future retrieval.
"""

REQUIRED_PROMPT_ELEMENTS = (
    "TECHNICAL",
    "DECISION",
    "SOLUTION",
    "CONCEPT",
    "REFERENCE",
    "APPLICATION",
    "YYYY-MM-DD",
)


def missing_prompt_elements(prompt: str) -> list[str]:
    """Return the required markers absent from *prompt*, in declaration order."""
    return [element for element in REQUIRED_PROMPT_ELEMENTS if element not in prompt]


def validate_system_prompt(prompt: str) -> bool:
    """Check that a prompt carries every formatting marker. Never raises."""
    missing = missing_prompt_elements(prompt)
    if missing:
        logger.warning("System prompt is missing required elements: %s", ", ".join(missing))
        return False
    return True
