"""
Placeholder Resolution Pipeline
Orchestrates scan -> cache check -> text + image generation -> fallback merge -> cache store
for website templates containing [PLACEHOLDER] tokens.
"""
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional

from .generator import ContentGenerator
from .image_resolver import ImageResolver
from .text_resolver import TextResolution, TextResolver
from utils.logger import get_logger
from utils.default_content import default_value, resolve_project_name
from utils.placeholder_scanner import replace_placeholders, scan_placeholders, split_placeholders
from utils.resolution_cache import InMemoryResolutionCache, ResolutionCache, make_cache_key
from config import GEMINI_API_KEY, FILE_MAX_WORKERS, LOG_LEVEL, LOG_FILE

CONFIDENCE_NO_PLACEHOLDERS = 1.0
CONFIDENCE_GENERATED = 0.9
CONFIDENCE_FALLBACK = 0.5

TOKEN_USAGE_KEYS = ('prompt_tokens', 'candidates_tokens', 'total_tokens')


@dataclass
class BusinessContext:
    industry: str
    specific_niche: str = ''
    business_model: str = ''
    key_differentiators: List[str] = field(default_factory=list)
    target_audience: Optional[str] = None
    market_position: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'BusinessContext':
        """Accept both snake_case and the camelCase keys used by the chat flow."""
        data = data or {}
        differentiators = data.get('key_differentiators', data.get('keyDifferentiators')) or []
        if isinstance(differentiators, str):
            differentiators = [differentiators]
        return cls(
            industry=data.get('industry') or '',
            specific_niche=data.get('specific_niche', data.get('specificNiche')) or '',
            business_model=data.get('business_model', data.get('businessModel')) or '',
            key_differentiators=[str(d) for d in differentiators],
            target_audience=data.get('target_audience', data.get('targetAudience')),
            market_position=data.get('market_position', data.get('marketPosition')),
        )


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of one resolution.

    replacements is the union of three disjoint partitions: generated (model
    output), fallback (default content table) and alt_texts (always built
    deterministically, never counted as fallback).
    """
    replaced_template: str
    replacements: Dict[str, str]
    confidence: float
    fallback_used: bool
    generated: Dict[str, str] = field(default_factory=dict)
    fallback: Dict[str, str] = field(default_factory=dict)
    alt_texts: Dict[str, str] = field(default_factory=dict)

    @property
    def remaining(self) -> List[str]:
        return scan_placeholders(self.replaced_template)

    def copy(self) -> 'ResolutionResult':
        """Copy with fresh mappings, so cached entries are never shared with callers."""
        return replace(
            self,
            replacements=dict(self.replacements),
            generated=dict(self.generated),
            fallback=dict(self.fallback),
            alt_texts=dict(self.alt_texts),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'replaced_template': self.replaced_template,
            'replacements': dict(self.replacements),
            'confidence': self.confidence,
            'fallback_used': self.fallback_used,
        }


class PlaceholderResolver:
    def __init__(self, generator=None, cache: Optional[ResolutionCache] = None, prompt_manager=None,
                 text_resolver: Optional[TextResolver] = None, image_resolver: Optional[ImageResolver] = None):
        """generator=None runs the deterministic fallback tier only."""
        self.logger = get_logger(__name__, LOG_LEVEL, LOG_FILE)
        self.generator = generator
        self.cache = cache if cache is not None else InMemoryResolutionCache()
        self.text_resolver = text_resolver or TextResolver(generator, prompt_manager)
        self.image_resolver = image_resolver or ImageResolver(generator, prompt_manager)

    def resolve(self,
                template: str,
                final_json: Optional[Dict[str, Any]],
                ctx: BusinessContext,
                project_name: Optional[str] = None,
                user_intent: Optional[str] = None) -> ResolutionResult:
        """Resolve every placeholder in a template. Never raises for generation failures."""
        final_json = final_json or {}
        placeholders = scan_placeholders(template)
        self.logger.info(f"Detected placeholders: {len(placeholders)} (industry={ctx.industry}, project={project_name})")
        if not placeholders:
            return ResolutionResult(template, {}, CONFIDENCE_NO_PLACEHOLDERS, False)

        cache_key = make_cache_key(template, ctx.industry, project_name)
        cached = self.cache.get(cache_key)
        if cached is not None:
            self.logger.info("Cache hit. Returning cached resolution.")
            return cached.copy()

        text_names, image_names, alt_names = split_placeholders(placeholders)
        text_resolution, image_urls = self._generate(template, text_names, image_names,
                                                     final_json, ctx, project_name, user_intent)

        result = self._merge(template, placeholders, text_names, text_resolution, image_urls, alt_names,
                             final_json, ctx, project_name)
        self.cache.set(cache_key, result.copy())
        return result

    def token_usage(self) -> Optional[Dict[str, int]]:
        """Cumulative generator token counts, or None when no usage-tracking generator is attached."""
        summary = getattr(self.generator, 'get_token_usage_summary', None)
        if summary is None:
            return None
        usage = summary()
        return {key: usage.get(key, 0) for key in TOKEN_USAGE_KEYS}

    def _generate(self, template, text_names, image_names, final_json, ctx, project_name, user_intent):
        """Run the text stage and the image stage side by side; either may fail on its own."""
        if not text_names and not image_names:
            return TextResolution(template, {}, True), {}

        with ThreadPoolExecutor(max_workers=2) as executor:
            text_future = executor.submit(self.text_resolver.resolve, template, text_names,
                                          final_json, ctx, project_name, user_intent)
            image_future = executor.submit(self.image_resolver.resolve_all, image_names,
                                           final_json, ctx, project_name)
            try:
                text_resolution = text_future.result()
            except Exception as e:
                self.logger.warning(f"AI replacement failed, using fallback: {e}")
                text_resolution = TextResolution(template, {}, False)
            try:
                image_urls = image_future.result()
            except Exception as e:
                self.logger.warning(f"Image generation failed, using fallback assets: {e}")
                image_urls = {}
        return text_resolution, image_urls

    def _merge(self, template, placeholders, text_names, text_resolution, image_urls, alt_names,
               final_json, ctx, project_name) -> ResolutionResult:
        generated = {**text_resolution.replacements, **image_urls}
        project_label = resolve_project_name(project_name, final_json)
        alt_texts = self.image_resolver.resolve_alt_texts(alt_names, ctx.industry, project_label)

        fallback: Dict[str, str] = {}
        for name in placeholders:
            if name in generated or name in alt_texts:
                continue
            value = default_value(name, ctx.industry, final_json, project_name)
            if value is not None:
                fallback[name] = value

        replacements = {**generated, **fallback, **alt_texts}
        replaced = replace_placeholders(template, replacements)

        # Image-only fallbacks leave confidence untouched
        text_fallbacks = [name for name in text_names if name in fallback]
        fallback_used = not text_resolution.succeeded or bool(text_fallbacks)
        confidence = CONFIDENCE_FALLBACK if fallback_used else CONFIDENCE_GENERATED

        result = ResolutionResult(replaced, replacements, confidence, fallback_used,
                                  generated=generated, fallback=fallback, alt_texts=alt_texts)
        self.logger.info(
            f"Replacement complete: generated={len(generated)}, fallback={len(fallback)}, "
            f"fallback_used={fallback_used}, remaining={result.remaining}"
        )
        return result

    def fallback_only(self,
                      template: str,
                      final_json: Optional[Dict[str, Any]],
                      ctx: BusinessContext,
                      project_name: Optional[str] = None) -> ResolutionResult:
        """Resolve with the default content table alone, without touching the cache."""
        final_json = final_json or {}
        placeholders = scan_placeholders(template)
        if not placeholders:
            return ResolutionResult(template, {}, CONFIDENCE_NO_PLACEHOLDERS, False)
        text_names, _, alt_names = split_placeholders(placeholders)
        return self._merge(template, placeholders, text_names, TextResolution(template, {}, False), {},
                           alt_names, final_json, ctx, project_name)

    def resolve_many(self,
                     files: Dict[str, str],
                     final_json: Optional[Dict[str, Any]],
                     ctx: BusinessContext,
                     project_name: Optional[str] = None,
                     user_intent: Optional[str] = None,
                     on_progress: Optional[Callable[[int, int, str], None]] = None,
                     max_workers: int = FILE_MAX_WORKERS) -> Dict[str, ResolutionResult]:
        """Resolve several file templates concurrently, one independent resolution per path."""
        results: Dict[str, ResolutionResult] = {}
        total = len(files)
        if not files:
            return results

        self.logger.info(f"📁 Resolving {total} files")
        with ThreadPoolExecutor(max_workers=max(1, min(max_workers, total))) as executor:
            futures = {
                executor.submit(self.resolve, template, final_json, ctx, project_name, user_intent): path
                for path, template in files.items()
            }
            for future in as_completed(futures):
                path = futures[future]
                try:
                    results[path] = future.result()
                except Exception as e:
                    self.logger.error(f"Resolution failed for {path}, using fallback content: {e}")
                    results[path] = self.fallback_only(files[path], final_json, ctx, project_name)
                if on_progress:
                    on_progress(len(results), total, path)
        return results


def create_resolver(use_ai: bool = True, cache: Optional[ResolutionCache] = None) -> PlaceholderResolver:
    """Resolver wired to Gemini when an API key is configured, fallback-only otherwise."""
    logger = get_logger(__name__, LOG_LEVEL, LOG_FILE)
    generator = None
    if use_ai:
        if GEMINI_API_KEY:
            generator = ContentGenerator()
            logger.info("AI Content Generator initialized")
        else:
            logger.warning("GEMINI_API_KEY not configured - resolving with fallback content only")
    return PlaceholderResolver(generator=generator, cache=cache)
