"""Gemini client factory and the single outbound model call.

Usage:
    from mcqgen.services.llm_service.llm import invoke_model

    text = invoke_model(system_prompt, user_prompt, count=10)

No retries happen here; the client is built with ``max_retries=0`` and
every transport failure is raised as BackendUnavailableError.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, List, Optional

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from mcqgen.core.config import settings
from mcqgen.core.exceptions import BackendUnavailableError, ConfigurationError

logger = logging.getLogger(__name__)

_UNAVAILABLE_MSG = "Question generation backend is unavailable. Please try again."


# ── Budget & credentials ──────────────────────────────────


def compute_token_budget(count: int) -> int:
    """Output token allowance for *count* questions: base + per-question, capped."""
    budget = settings.LLM_TOKEN_BASE + count * settings.LLM_TOKENS_PER_QUESTION
    return min(budget, settings.LLM_TOKEN_CAP)


def resolve_api_key(api_key: Optional[str] = None) -> str:
    """Explicit key first, then ``GOOGLE_API_KEY`` from settings.

    Raises:
        ConfigurationError: if neither is set.
    """
    key = (api_key or "").strip() or settings.GOOGLE_API_KEY.strip()
    if not key:
        raise ConfigurationError("Gemini API key is required. Please add it in Settings.")
    return key


# ── Builder ───────────────────────────────────────────────


def _common_kwargs(
    temperature: float,
    top_p: Optional[float] = None,
    max_tokens: Optional[int] = None,
    **extra_kwargs
) -> dict:
    """Shared generation kwargs with explicit timeout and no client retries."""
    kwargs = {
        "temperature": temperature,
        "timeout": settings.LLM_TIMEOUT,
        "max_retries": 0,
    }

    if max_tokens:
        kwargs["max_tokens"] = max_tokens

    if top_p is not None:
        kwargs["top_p"] = top_p

    kwargs.update(extra_kwargs)
    return kwargs


def get_llm_structured(
    api_key: str,
    max_tokens: int,
    temperature: Optional[float] = None,
    top_p: Optional[float] = None,
    **kwargs
) -> ChatGoogleGenerativeAI:
    """Return a Gemini chat model tuned for JSON output (low temperature).

    Args:
        api_key: Resolved credential.
        max_tokens: Output token budget for this call.
        temperature: Override LLM_TEMPERATURE_STRUCTURED.
        top_p: Override LLM_TOP_P_STRUCTURED.
        **kwargs: Extra ChatGoogleGenerativeAI parameters.
    """
    temp = temperature if temperature is not None else settings.LLM_TEMPERATURE_STRUCTURED
    p = top_p if top_p is not None else settings.LLM_TOP_P_STRUCTURED
    kwargs.setdefault("top_k", settings.LLM_TOP_K)

    kw = _common_kwargs(temp, p, max_tokens, **kwargs)
    kw.update(
        model=settings.GOOGLE_MODEL,
        google_api_key=api_key,
    )
    return ChatGoogleGenerativeAI(**kw)


# ── Invocation ────────────────────────────────────────────


def _response_text(response: Any) -> str:
    """Flatten a chat response to plain text.

    Gemini may return ``content`` as a list of parts (strings or
    ``{"type": "text", "text": ...}`` dicts) instead of a string.
    """
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts).strip()
    return str(content).strip()


def _prepare(system_prompt: str, user_prompt: str, count: int, api_key: Optional[str]):
    key = resolve_api_key(api_key)
    budget = compute_token_budget(count)
    llm = get_llm_structured(api_key=key, max_tokens=budget)
    messages: List[BaseMessage] = [
        SystemMessage(content=system_prompt),
        HumanMessage(content=user_prompt),
    ]
    logger.debug("Invoking %s (max_tokens=%d, count=%d)", settings.GOOGLE_MODEL, budget, count)
    return llm, messages


def invoke_model(
    system_prompt: str,
    user_prompt: str,
    count: int,
    api_key: Optional[str] = None,
) -> str:
    """Send one system + user prompt pair and return the raw completion text.

    Raises:
        ConfigurationError: no API key available.
        BackendUnavailableError: network, auth, timeout or provider error.
    """
    llm, messages = _prepare(system_prompt, user_prompt, count, api_key)

    start = time.time()
    try:
        response = llm.invoke(messages)
    except Exception as exc:
        logger.error("LLM call failed after %.2fs: %s: %s", time.time() - start, type(exc).__name__, exc)
        raise BackendUnavailableError(_UNAVAILABLE_MSG) from exc

    logger.info("LLM responded in %.2fs", time.time() - start)
    return _response_text(response)


async def ainvoke_model(
    system_prompt: str,
    user_prompt: str,
    count: int,
    api_key: Optional[str] = None,
) -> str:
    """Async version of invoke_model, bounded by LLM_TIMEOUT."""
    llm, messages = _prepare(system_prompt, user_prompt, count, api_key)

    start = time.time()
    try:
        response = await asyncio.wait_for(llm.ainvoke(messages), timeout=settings.LLM_TIMEOUT)
    except Exception as exc:
        logger.error("Async LLM call failed after %.2fs: %s: %s", time.time() - start, type(exc).__name__, exc)
        raise BackendUnavailableError(_UNAVAILABLE_MSG) from exc

    logger.info("Async LLM responded in %.2fs", time.time() - start)
    return _response_text(response)
