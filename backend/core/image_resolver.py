"""
Image Resolution Stage
Each image URL placeholder gets its own prompt and its own generation call;
alt text is always built deterministically.
"""
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional

from utils.logger import get_logger
from utils.default_content import image_alt_for_placeholder
from utils.prompt_manager import prompt_manager as default_prompt_manager
from config import LOG_LEVEL, LOG_FILE, IMAGE_MAX_WORKERS


class ImageResolver:
    def __init__(self, generator=None, prompt_manager=None, max_workers: int = IMAGE_MAX_WORKERS):
        self.generator = generator
        self.prompt_manager = prompt_manager or default_prompt_manager
        self.max_workers = max_workers
        self.logger = get_logger(__name__, LOG_LEVEL, LOG_FILE)

    def resolve_one(self,
                    placeholder: str,
                    final_json: Dict[str, Any],
                    ctx,
                    project_name: Optional[str] = None) -> Optional[str]:
        """Generated URL for one image placeholder, or None (left for the fallback asset)."""
        if self.generator is None:
            return None
        try:
            prompt = self.prompt_manager.build_image_prompt(placeholder, final_json, ctx, project_name)
            size = self.prompt_manager.get_image_settings(placeholder).get('size', '1024x1024')
            self.logger.info(f"🖼️ Generating {placeholder} ({size})")
            url = self.generator.generate_image(prompt, size)
            if not url:
                self.logger.warning(f"No image generated for {placeholder} - using fallback asset")
                return None
            return url
        except Exception as e:
            self.logger.error(f"Error generating image for {placeholder}: {e}")
            return None

    def resolve_all(self,
                    placeholders: List[str],
                    final_json: Dict[str, Any],
                    ctx,
                    project_name: Optional[str] = None) -> Dict[str, str]:
        """Resolve every image placeholder concurrently; failures are simply absent from the result."""
        urls: Dict[str, str] = {}
        if not placeholders or self.generator is None:
            return urls

        with ThreadPoolExecutor(max_workers=max(1, min(self.max_workers, len(placeholders)))) as executor:
            futures = {
                executor.submit(self.resolve_one, name, final_json, ctx, project_name): name
                for name in placeholders
            }
            for future in as_completed(futures):
                name = futures[future]
                try:
                    url = future.result()
                except Exception as e:
                    self.logger.error(f"Image task for {name} failed: {e}")
                    continue
                if url:
                    urls[name] = url
        return urls

    def resolve_alt_texts(self,
                          placeholders: List[str],
                          industry: Optional[str],
                          project_name: Optional[str]) -> Dict[str, str]:
        return {name: image_alt_for_placeholder(name, industry, project_name) for name in placeholders}
