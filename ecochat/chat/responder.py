"""Keyword responder for recycling questions.

Pure and total: every input maps to a non-empty reply. Rules are checked in
order and the first keyword hit wins.
"""

from collections.abc import Callable

ResponseEngine = Callable[[str], str]

WELCOME_TEXT = (
    "Hello! I'm Sortify, your AI recycling assistant. I can help you sort waste, "
    "find recycling centers, and learn about sustainable practices. "
    "What would you like to know?"
)

FALLBACK_REPLY = (
    "I'd be happy to help you with recycling questions! You can ask me about specific "
    "materials like plastic, paper, glass, electronics, or find local recycling centers. "
    "What specific item would you like to know about? 🌍💚"
)

_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("plastic", "bottle"),
        "Plastic bottles can be recycled! Remove caps and labels, rinse clean, and place "
        "in your recycling bin. Look for the recycling symbol with numbers 1-7 to identify "
        "the plastic type. 🌱",
    ),
    (
        ("paper", "cardboard"),
        "Paper and cardboard are highly recyclable! Keep them dry, remove any plastic "
        "wrapping, and place in your paper recycling bin. Pizza boxes can be recycled if "
        "they're not too greasy. 📄♻️",
    ),
    (
        ("glass",),
        "Glass is 100% recyclable and can be recycled endlessly! Rinse containers clean "
        "and remove lids. Clear, brown, and green glass can all be recycled. 🫙✨",
    ),
    (
        ("battery", "electronic"),
        "Electronic waste needs special handling! Never throw batteries or electronics in "
        "regular trash. Take them to designated e-waste collection points or retailer "
        "drop-off programs. 🔋♻️",
    ),
)


def generate_reply(text: str) -> str:
    """Map the latest user text to a reply.

    Args:
        text: The user's message.

    Returns:
        The reply for the first matching keyword rule, or the fallback.
    """
    lowered = text.lower()
    for keywords, reply in _RULES:
        if any(keyword in lowered for keyword in keywords):
            return reply
    return FALLBACK_REPLY
