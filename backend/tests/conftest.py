"""
Shared fixtures: fake generators standing in for Gemini so no test needs network access.
"""
import json
import threading

import pytest

from core.resolver import BusinessContext, PlaceholderResolver


class FakeGenerator:
    """Records every call; text answers come from a dict (or raw string), images get sequential URLs."""

    def __init__(self, text=None, failing_images=(), text_error=None, image_error=None):
        self.text = text
        self.failing_images = failing_images
        self.text_error = text_error
        self.image_error = image_error
        self.text_calls = []
        self.image_calls = []
        self.usage = {"prompt_tokens": 0, "candidates_tokens": 0, "total_tokens": 0}
        self._lock = threading.Lock()

    def generate_text(self, prompt):
        with self._lock:
            self.text_calls.append(prompt)
            self.usage["prompt_tokens"] += 80
            self.usage["candidates_tokens"] += 20
            self.usage["total_tokens"] += 100
        if self.text_error:
            raise self.text_error
        if self.text is None:
            return None
        return self.text if isinstance(self.text, str) else json.dumps(self.text)

    def generate_image(self, prompt, size="1024x1024"):
        with self._lock:
            self.image_calls.append((prompt, size))
            count = len(self.image_calls)
        if self.image_error:
            raise self.image_error
        if any(keyword in prompt for keyword in self.failing_images):
            return None
        return f"/generated-images/fake_{count}_{size}.jpg"

    def get_token_usage_summary(self):
        with self._lock:
            return {**self.usage, "details": []}


@pytest.fixture
def make_generator():
    return FakeGenerator


@pytest.fixture
def cafe():
    return BusinessContext(industry="cafe")


@pytest.fixture
def offline_resolver():
    return PlaceholderResolver(generator=None)
