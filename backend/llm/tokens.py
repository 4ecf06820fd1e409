"""Token budgeting for documents sent to the model."""

import os

import tiktoken
from dotenv import load_dotenv

load_dotenv()

# Token limit from environment (default 175k)
TOKEN_LIMIT = int(os.getenv("TOKEN_LIMIT", "175000"))


def _encoding(model: str):
    try:
        return tiktoken.encoding_for_model(model)
    except KeyError:
        # Fallback to cl100k_base encoding (used by gpt-4 and gpt-3.5-turbo)
        return tiktoken.get_encoding("cl100k_base")


def truncate_to_token_limit(text: str, limit: int = TOKEN_LIMIT, model: str = "gpt-4.1") -> str:
    """Cut text down to at most ``limit`` tokens, keeping the beginning."""
    encoding = _encoding(model)
    tokens = encoding.encode(text)
    if len(tokens) <= limit:
        return text
    print(f"Document size: {len(tokens):,} tokens - truncating to {limit:,}")
    return encoding.decode(tokens[:limit])
