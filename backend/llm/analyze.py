"""LLM analysis: document text in, Minto pyramid out."""

import json
import os
import re
from typing import List

from dotenv import load_dotenv
from llama_index.core.llms import ChatMessage, MessageRole
from llama_index.llms.openai import OpenAI
from pydantic import ValidationError

from pyramid.models import PyramidDocument, parse_pyramid_document
from pyramid.mutations import new_node_id

from . import prompts
from .tokens import TOKEN_LIMIT, truncate_to_token_limit

# Load environment variables
load_dotenv()

# Configuration from environment
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4.1")
FALLBACK_LLM_MODEL = os.getenv("FALLBACK_LLM_MODEL", "gpt-4.1-nano")
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "300"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "4096"))

CODE_FENCE_RE = re.compile(r"```(?:json)?\n?")


class PyramidParseError(Exception):
    """The model answered, but not with a usable pyramid. Keeps the raw text."""

    def __init__(self, message: str, raw: str):
        super().__init__(message)
        self.message = message
        self.raw = raw


def has_api_key() -> bool:
    return bool(os.getenv("OPENAI_API_KEY"))


def clean_model_response(text: str) -> str:
    """Remove markdown code fences the model likes to wrap JSON in."""
    return CODE_FENCE_RE.sub("", text).strip()


def parse_model_response(text: str, fallback_title: str) -> PyramidDocument:
    """
    Parse the model's answer into a sanitized PyramidDocument.

    Raises PyramidParseError (with the raw text) when the answer is not JSON
    or does not contain a pyramid object.
    """
    cleaned = clean_model_response(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        print(f"Failed to parse model response: {cleaned}")
        raise PyramidParseError("Failed to parse AI response", raw=cleaned)

    try:
        return parse_pyramid_document(data, fallback_title, new_node_id)
    except (ValueError, ValidationError) as e:
        print(f"Model response has no usable pyramid: {e}")
        raise PyramidParseError("Failed to parse AI response", raw=cleaned)


def _is_token_error(error: Exception) -> bool:
    error_msg = str(error).lower()
    error_type = type(error).__name__.lower()
    return (
        "maximum context" in error_msg or
        "context length" in error_msg or
        "request too large" in error_msg or
        "tokens per min" in error_msg or
        ("ratelimiterror" in error_type and "token" in error_msg)
    )


def call_llm(messages: List[ChatMessage]) -> str:
    """Send chat messages to the model, retrying once on a token-limit error."""
    llm = OpenAI(
        model=LLM_MODEL,
        max_tokens=LLM_MAX_TOKENS,
        api_key=os.getenv("OPENAI_API_KEY"),
        timeout=LLM_TIMEOUT,
    )
    try:
        resp = llm.chat(messages)
    except Exception as e:
        if not _is_token_error(e):
            raise
        print(f"Token limit exceeded, retrying with {FALLBACK_LLM_MODEL}...")
        llm = OpenAI(
            model=FALLBACK_LLM_MODEL,
            max_tokens=LLM_MAX_TOKENS,
            api_key=os.getenv("OPENAI_API_KEY"),
            timeout=LLM_TIMEOUT,
        )
        resp = llm.chat(messages)
    return resp.message.content or ""


def build_messages(title: str, text: str) -> List[ChatMessage]:
    document = truncate_to_token_limit(text, TOKEN_LIMIT, LLM_MODEL)
    return [
        ChatMessage(role=MessageRole.SYSTEM, content=prompts.PYRAMID_SYSTEM_PROMPT),
        ChatMessage(role=MessageRole.USER, content=prompts.PYRAMID_USER_PROMPT.format(title=title, document=document)),
    ]


def analyze_document(title: str, text: str) -> PyramidDocument:
    """
    Run the Minto Pyramid extraction on a document.

    Raises ValueError for empty input, RuntimeError when no API key is
    configured, PyramidParseError for an unusable answer, and lets transport
    errors from the OpenAI client propagate.
    """
    if not text.strip():
        raise ValueError("Document is empty")
    if not has_api_key():
        raise RuntimeError("Set OPENAI_API_KEY in your environment first.")

    print(f"🔄 Analyzing document: {title} ({len(text)} chars) with {LLM_MODEL}...")
    raw = call_llm(build_messages(title, text))
    result = parse_model_response(raw, fallback_title=title)
    print(f"✅ Pyramid ready: {result.title} ({len(result.pyramid.children)} key arguments)")
    return result
