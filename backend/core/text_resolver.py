"""
Text Resolution Stage
Fills the non-image placeholders of a template with a single generation call.
"""
import json
from typing import Any, Dict, List, Optional

from utils.logger import get_logger
from utils.placeholder_scanner import replace_placeholders, scan_placeholders
from utils.prompt_manager import prompt_manager as default_prompt_manager
from config import LOG_LEVEL, LOG_FILE


class TextResolution:
    def __init__(self, replaced_template: str, replacements: Dict[str, str], succeeded: bool):
        self.replaced_template = replaced_template
        self.replacements = replacements
        self.succeeded = succeeded

    @property
    def remaining(self) -> List[str]:
        return scan_placeholders(self.replaced_template)


class TextResolver:
    def __init__(self, generator=None, prompt_manager=None):
        self.generator = generator
        self.prompt_manager = prompt_manager or default_prompt_manager
        self.logger = get_logger(__name__, LOG_LEVEL, LOG_FILE)

    def resolve(self,
                template: str,
                placeholders: List[str],
                final_json: Dict[str, Any],
                ctx,
                project_name: Optional[str] = None,
                user_intent: Optional[str] = None) -> TextResolution:
        """Ask the text model for every placeholder at once and substitute what comes back.

        Never raises: any failure yields a resolution with no replacements and
        succeeded=False, leaving all tokens for the fallback merge.
        """
        if not placeholders:
            return TextResolution(template, {}, True)
        if self.generator is None:
            self.logger.info("No text generator configured - skipping AI replacement")
            return TextResolution(template, {}, False)

        try:
            prompt = self.prompt_manager.build_text_prompt(placeholders, final_json, ctx, project_name, user_intent)
            response = self.generator.generate_text(prompt)
            if not response:
                self.logger.warning("AI responded with empty content")
                return TextResolution(template, {}, False)

            parsed = json.loads(response)
            if not isinstance(parsed, dict):
                self.logger.warning(f"AI response is not a JSON object ({type(parsed).__name__})")
                return TextResolution(template, {}, False)

            applied: Dict[str, str] = {}
            for name in placeholders:
                value = parsed.get(name)
                if value is None or isinstance(value, (dict, list)):
                    continue
                value = str(value).strip()
                if value:
                    applied[name] = value

            replaced = replace_placeholders(template, applied)
            resolution = TextResolution(replaced, applied, True)
            self.logger.info(
                f"🤖 AI replacements applied: {len(applied)}/{len(placeholders)} "
                f"(remaining: {resolution.remaining})"
            )
            return resolution
        except json.JSONDecodeError as e:
            self.logger.error(f"JSON parsing error in AI replacement response: {e}")
            return TextResolution(template, {}, False)
        except Exception as e:
            self.logger.error(f"AI replacement error: {e}")
            return TextResolution(template, {}, False)
