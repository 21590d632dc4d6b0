"""Detection of model replies that decline to describe the image."""

_SORRY_PHRASES = (
    "can't assist",
    "can't identify",
    "can't describe",
    "can't help",
    "cannot identify",
    "cannot describe",
    "cannot help",
    "don't know who this is",
)

_REFUSAL_PHRASES = (
    "i'm not able to identify",
    "i cannot identify",
    "i'm unable to",
    "i am unable to",
    "don't know who this is",
    "do not know who this is",
)


def is_refusal(text: str) -> bool:
    """Check whether a model reply is a refusal rather than an answer.

    Matching is case-insensitive substring matching over the whole reply.
    """
    lowered = (text or "").lower()

    if "sorry" in lowered and any(phrase in lowered for phrase in _SORRY_PHRASES):
        return True
    if any(phrase in lowered for phrase in _REFUSAL_PHRASES):
        return True
    if "unable" in lowered and "identify" in lowered:
        return True
    if ("i can't" in lowered or "i cannot" in lowered) and "help" in lowered:
        return True
    return False
