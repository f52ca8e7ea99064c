import re


# An acronym run ends where a capitalized word starts (XMLData -> XML, Data).
_WORD = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")


def split_words(name: str) -> list[str]:
    return _WORD.findall(name)


def upper_snake_case(name: str) -> str:
    """
    pathPaymentStrictReceive -> PATH_PAYMENT_STRICT_RECEIVE
    sha256Hash               -> SHA_256_HASH
    """
    return "_".join(word.upper() for word in split_words(name))


def camel_case(tag: str) -> str:
    """
    Inverse of `upper_snake_case` for names without acronym runs:
    PATH_PAYMENT_STRICT_RECEIVE -> pathPaymentStrictReceive.
    """
    words = [word for word in tag.lower().split("_") if word]
    if not words:
        return ""
    return words[0] + "".join(word.capitalize() for word in words[1:])
