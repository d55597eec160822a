"""
AI Prompt Manager
Handles loading and formatting of text and image prompts from the prompts/ directory
"""
import json
import os
import re
from typing import Any, Dict, List, Optional

from utils.logger import get_logger
from config import LOG_LEVEL, LOG_FILE, DEFAULT_USER_INTENT, DEFAULT_PROJECT_NAME

PROMPTS_DIR = os.path.join(os.path.dirname(__file__), '..', 'prompts')

IMAGE_CATEGORY_PATTERN = re.compile(r'^([A-Z]+)_IMAGE_URL(?:_(\d+))?$')


class PromptManager:
    def __init__(self, prompts_dir: str = PROMPTS_DIR):
        self.logger = get_logger(__name__, LOG_LEVEL, LOG_FILE)
        self.prompts_dir = prompts_dir
        self.prompts = self._load_prompts()

    def _load_prompts(self):
        """Load prompts from the separated configuration files"""
        try:
            with open(os.path.join(self.prompts_dir, 'prompts_text.json'), 'r', encoding='utf-8') as f:
                text_prompts = json.load(f)
            with open(os.path.join(self.prompts_dir, 'prompts_image.json'), 'r', encoding='utf-8') as f:
                image_prompts = json.load(f)
            return {
                'text_prompts': text_prompts.get('prompts', {}),
                'image_prompts': image_prompts.get('prompts', {}),
            }
        except Exception as e:
            self.logger.error(f"Failed to load AI prompts: {e}")
            raise e

    def _format_prompt(self, template, **kwargs):
        """Format a prompt template with provided variables"""
        try:
            defaults = {
                'industry': 'business',
                'project_name': DEFAULT_PROJECT_NAME,
                'business_name': DEFAULT_PROJECT_NAME,
                'user_intent': DEFAULT_USER_INTENT,
            }
            return template.format(**{**defaults, **kwargs})
        except Exception as e:
            self.logger.warning(f"Failed to format prompt: {e}")
            return template

    # ------------------------------------------------------------------
    # Text prompt
    # ------------------------------------------------------------------

    def build_text_prompt(self,
                          placeholders: List[str],
                          final_json: Dict[str, Any],
                          ctx,
                          project_name: Optional[str] = None,
                          user_intent: Optional[str] = None) -> str:
        """One prompt per template asking for a flat JSON object keyed by placeholder name."""
        template = self.prompts['text_prompts'].get('template_replacement')
        if not template:
            raise ValueError("No text prompt found for template_replacement")

        project = _section(final_json, 'project')
        business = _section(final_json, 'business')
        industry = ctx.industry or 'business'

        return self._format_prompt(
            template,
            industry=industry,
            specific_niche=ctx.specific_niche or 'n/a',
            business_model=ctx.business_model or 'n/a',
            key_differentiators=', '.join(ctx.key_differentiators) or 'n/a',
            project_name=project_name or project.get('name') or DEFAULT_PROJECT_NAME,
            business_name=business.get('name') or project.get('name') or industry,
            business_description=business.get('description') or project.get('description') or '',
            user_intent=user_intent or DEFAULT_USER_INTENT,
            hero_info=_snapshot(final_json, 'hero'),
            contact_info=_snapshot(final_json, 'contact'),
            menu_info=_snapshot(final_json, 'menu'),
            featured_info=_snapshot(final_json, 'featured'),
            placeholder_list='\n'.join(f"- {name}" for name in placeholders),
        )

    # ------------------------------------------------------------------
    # Image prompts
    # ------------------------------------------------------------------

    def get_image_settings(self, placeholder: str) -> Dict[str, Any]:
        """Prompt settings for an image URL placeholder (HERO_IMAGE_URL, MENU_IMAGE_URL_2, ...)."""
        category, _ = image_category(placeholder)
        settings = self.prompts['image_prompts'].get(category)
        if not settings:
            raise ValueError(f"No image prompt found for {placeholder}")
        return settings

    def build_image_prompt(self,
                           placeholder: str,
                           final_json: Dict[str, Any],
                           ctx,
                           project_name: Optional[str] = None) -> str:
        settings = self.get_image_settings(placeholder)
        _, index = image_category(placeholder)

        project = _section(final_json, 'project')
        business = _section(final_json, 'business')
        section = _section(final_json, settings.get('hint_section', ''))

        hints = [
            f"{key}: {section[key]}"
            for key in settings.get('hint_keys', [])
            if isinstance(section.get(key), (str, int, float)) and str(section.get(key)).strip()
        ]
        hint_text = f" ({'; '.join(hints)})" if hints else ''

        item = ''
        if index:
            items = _section(final_json, 'menu').get('items')
            if isinstance(items, list) and 0 < index <= len(items) and isinstance(items[index - 1], dict):
                name = items[index - 1].get('name')
                if name:
                    item = f" '{name}'"

        prompt = self._format_prompt(
            settings['template'],
            industry=ctx.industry or 'business',
            business_name=business.get('name') or project_name or project.get('name') or DEFAULT_PROJECT_NAME,
            hints=hint_text,
            item=item,
        )
        return f"{prompt} Style: {settings['style']}."


def image_category(placeholder: str):
    """HERO_IMAGE_URL -> ('HERO', None); MENU_IMAGE_URL_2 -> ('MENU', 2)."""
    match = IMAGE_CATEGORY_PATTERN.match(placeholder)
    if not match:
        raise ValueError(f"Not an image URL placeholder: {placeholder}")
    index = match.group(2)
    return match.group(1), int(index) if index else None


def _section(final_json: Optional[Dict[str, Any]], key: str) -> Dict[str, Any]:
    value = (final_json or {}).get(key)
    return value if isinstance(value, dict) else {}


def _snapshot(final_json: Optional[Dict[str, Any]], key: str) -> str:
    return json.dumps((final_json or {}).get(key) or {}, ensure_ascii=False, default=str)


# Global instance for easy access
prompt_manager = PromptManager()
