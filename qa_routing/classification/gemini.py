"""
Minimal Gemini generateContent client shared by the classifier and summarizer.
"""

import httpx

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


def generate_content(api_key: str, model: str, prompt: str, timeout: float = 15.0) -> str:
    """
    Send a single-turn prompt and return the first candidate's text.

    Raises:
        httpx.HTTPError: on transport errors or a non-2xx status
        KeyError, IndexError, TypeError: on an unexpected payload shape
    """
    response = httpx.post(
        GEMINI_API_URL.format(model=model),
        params={"key": api_key},
        json={"contents": [{"parts": [{"text": prompt}]}]},
        timeout=timeout,
    )
    response.raise_for_status()
    data = response.json()
    return data["candidates"][0]["content"]["parts"][0]["text"]


__all__ = ["GEMINI_API_URL", "generate_content"]
