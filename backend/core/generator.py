"""
AI Content Generator for website templates
Wraps Google Gemini text and image models behind two fallible calls:
generate_text(prompt) and generate_image(prompt, size).
"""
import google.generativeai as genai
import hashlib
import os
import threading
import time
from collections import deque
from io import BytesIO
from typing import Optional
from PIL import Image, ImageOps
from config import (
    GEMINI_API_KEY,
    GEMINI_MODEL,
    GEMINI_IMAGE_MODEL,
    TEXT_GENERATION_CONFIG,
    SYSTEM_INSTRUCTION,
    GENERATED_IMAGES_DIR,
    GENERATED_IMAGES_URL_PREFIX,
    LOG_LEVEL,
    LOG_FILE,
)
from utils.logger import get_logger

TOKEN_USAGE_DETAILS_LIMIT = 200


class ContentGenerator:
    def __init__(self, api_key: Optional[str] = None,
                 output_dir: str = GENERATED_IMAGES_DIR,
                 url_prefix: str = GENERATED_IMAGES_URL_PREFIX):
        api_key = api_key or GEMINI_API_KEY
        if not api_key:
            raise ValueError("GEMINI_API_KEY not found in environment variables")

        genai.configure(api_key=api_key)
        self.model_name = GEMINI_MODEL
        self.image_model_name = GEMINI_IMAGE_MODEL
        self.text_model = genai.GenerativeModel(self.model_name, system_instruction=SYSTEM_INSTRUCTION)
        self.image_model = genai.GenerativeModel(self.image_model_name)
        self.output_dir = output_dir
        self.url_prefix = url_prefix.rstrip('/')
        self.logger = get_logger(__name__, LOG_LEVEL, LOG_FILE)
        self._usage_lock = threading.Lock()
        self.reset_token_usage()

    # ============================================================================
    # TOKEN USAGE TRACKING
    # ============================================================================

    def reset_token_usage(self):
        """Reset per-run token usage statistics."""
        with self._usage_lock:
            self._token_usage_summary = {
                'prompt_tokens': 0,
                'candidates_tokens': 0,
                'total_tokens': 0
            }
            self._token_usage_details = deque(maxlen=TOKEN_USAGE_DETAILS_LIMIT)

    def _record_token_usage(self, response, label=None):
        """Record token usage from a Gemini response, if available. Safe to call from worker threads."""
        usage = getattr(response, 'usage_metadata', None) if response else None
        if not usage:
            return

        prompt_tokens = getattr(usage, 'prompt_token_count', 0) or 0
        candidates_tokens = getattr(usage, 'candidates_token_count', 0) or 0
        total_tokens = getattr(usage, 'total_token_count', 0) or 0
        if not any([prompt_tokens, candidates_tokens, total_tokens]):
            return

        with self._usage_lock:
            self._token_usage_summary['prompt_tokens'] += prompt_tokens
            self._token_usage_summary['candidates_tokens'] += candidates_tokens
            self._token_usage_summary['total_tokens'] += total_tokens
            self._token_usage_details.append({
                'label': label or 'unspecified',
                'prompt_tokens': prompt_tokens,
                'candidates_tokens': candidates_tokens,
                'total_tokens': total_tokens
            })

    def get_token_usage_summary(self):
        """Return the aggregated token usage since the last reset (details keep the latest calls only)."""
        with self._usage_lock:
            return {
                **self._token_usage_summary,
                'details': list(self._token_usage_details)
            }

    # ============================================================================
    # TEXT
    # ============================================================================

    def generate_text(self, prompt: str) -> Optional[str]:
        """Return the model's raw JSON text for a replacement prompt, or None on any failure."""
        try:
            response = self.text_model.generate_content(prompt, generation_config=TEXT_GENERATION_CONFIG)
            self._record_token_usage(response, label="text:template_replacement")

            if not response.candidates:
                self.logger.error("No candidates in template replacement response")
                return None

            candidate = response.candidates[0]
            if hasattr(candidate, 'safety_ratings') and candidate.safety_ratings:
                for rating in candidate.safety_ratings:
                    if getattr(rating.probability, 'name', rating.probability) in ['HIGH', 'MEDIUM']:
                        self.logger.warning(f"Template replacement blocked: {rating.category} = {rating.probability}")
                        return None

            parts = getattr(getattr(candidate, 'content', None), 'parts', None)
            if not parts or not hasattr(parts[0], 'text'):
                self.logger.error("No valid content parts in template replacement response")
                return None

            text = strip_code_fences(parts[0].text)
            if not text:
                self.logger.warning("Gemini returned an empty template replacement response")
                return None
            self.logger.debug(f"Model raw response (first 200 chars): {text[:200]}")
            return text
        except Exception as e:
            self.logger.error(f"Error generating template replacements: {e}")
            return None

    # ============================================================================
    # IMAGES
    # ============================================================================

    def generate_image(self, prompt: str, size: str = "1024x1024", max_retries: int = 2) -> Optional[str]:
        """Generate one image, save it under output_dir and return its public URL, or None."""
        try:
            image_data = None
            for attempt in range(max_retries):
                try:
                    self.logger.info(f"Generating image (attempt {attempt + 1}/{max_retries})")
                    response = self.image_model.generate_content(prompt)
                    self._record_token_usage(response, label="image")
                    image_parts = [
                        part.inline_data.data
                        for part in response.candidates[0].content.parts
                        if getattr(part, "inline_data", None) and getattr(part.inline_data, "data", None)
                    ]
                    if image_parts:
                        image_data = image_parts[0]
                        break
                    self.logger.warning("No image data in response – retrying...")
                except Exception as e:
                    self.logger.warning(f"Gemini image generation attempt {attempt + 1} failed: {e}")
                if attempt + 1 < max_retries:
                    time.sleep(1.0 * (attempt + 1))

            if image_data is None:
                self.logger.error("No image data received from Gemini")
                return None

            image = Image.open(BytesIO(image_data)).convert('RGB')
            image = fit_to_size(image, size)

            os.makedirs(self.output_dir, exist_ok=True)
            filename = f"{hashlib.sha1(prompt.encode('utf-8')).hexdigest()[:16]}_{size}.jpg"
            filepath = os.path.join(self.output_dir, filename)
            image.save(filepath, format='JPEG', quality=85, optimize=True, progressive=True)
            self.logger.info(f"Image saved: {filepath} (size: {image.width}x{image.height} px)")
            return f"{self.url_prefix}/{filename}"
        except Exception as e:
            self.logger.error(f"Error generating image: {e}")
            return None


def strip_code_fences(text: Optional[str]) -> str:
    """Remove a surrounding ```json ... ``` fence if the model added one."""
    text = (text or '').strip()
    if text.startswith('```json'):
        text = text[7:]
    elif text.startswith('```'):
        text = text[3:]
    if text.endswith('```'):
        text = text[:-3]
    return text.strip()


def parse_size(size: str):
    """'1792x1024' -> (1792, 1024); None when the size string is malformed."""
    try:
        width, height = (int(v) for v in str(size).lower().split('x', 1))
    except ValueError:
        return None
    if width <= 0 or height <= 0:
        return None
    return width, height


def fit_to_size(image: Image.Image, size: str) -> Image.Image:
    """Center-crop and scale to the requested size (like CSS object-fit: cover)."""
    dims = parse_size(size)
    if not dims:
        return image
    return ImageOps.fit(image, dims, method=Image.Resampling.LANCZOS, centering=(0.5, 0.5))
