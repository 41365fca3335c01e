import math


def estimate_tokens(text: str) -> int:
    # ~4 chars per token; not a real tokenizer
    return math.ceil(len(text) / 4)
