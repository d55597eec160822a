"""
Tests for the placeholder resolution pipeline (scan, generate, fallback merge, cache).
"""
from dataclasses import FrozenInstanceError

import pytest

from config import DEFAULT_IMAGE_URL
from core.resolver import BusinessContext, PlaceholderResolver, ResolutionResult
from utils.resolution_cache import NullResolutionCache


def test_template_without_placeholders_is_untouched(make_generator, cafe):
    generator = make_generator(text={})
    resolver = PlaceholderResolver(generator=generator)
    template = "<div className=\"hero\">Hello</div>"

    result = resolver.resolve(template, {}, cafe)

    assert result.replaced_template == template
    assert result.confidence == 1.0
    assert result.fallback_used is False
    assert generator.text_calls == [] and generator.image_calls == []
    assert len(resolver.cache) == 0


def test_offline_resolution_uses_industry_defaults(offline_resolver, cafe):
    result = offline_resolver.resolve("[HERO_TITLE] | [CONTACT_PHONE]", {}, cafe)

    assert result.replaced_template == "Artisan Coffee Experience | 02-123-4567"
    assert result.confidence == 0.5
    assert result.fallback_used is True


def test_full_generation(make_generator, cafe):
    generator = make_generator(text={"HERO_TITLE": "Bean There", "CONTACT_PHONE": "081-000-1111"})
    resolver = PlaceholderResolver(generator=generator)
    template = '<img src="[HERO_IMAGE_URL]" alt="[HERO_IMAGE_ALT]"/><h1>[HERO_TITLE]</h1><p>[CONTACT_PHONE]</p>'

    result = resolver.resolve(template, {}, cafe, project_name="Bean Co")

    assert result.confidence == 0.9
    assert result.fallback_used is False
    assert result.remaining == []
    assert "<h1>Bean There</h1>" in result.replaced_template
    assert result.replacements["HERO_IMAGE_URL"].startswith("/generated-images/")
    assert result.replacements["HERO_IMAGE_ALT"] == "Bean Co - cafe hero banner"
    assert len(generator.text_calls) == 1
    assert len(generator.image_calls) == 1
    assert generator.image_calls[0][1] == "1792x1024"


def test_partial_text_coverage_counts_as_fallback(make_generator, cafe):
    generator = make_generator(text={"HERO_TITLE": "Bean There"})
    resolver = PlaceholderResolver(generator=generator)

    result = resolver.resolve("[HERO_TITLE] [HERO_SUBTITLE]", {}, cafe)

    assert result.replaced_template == "Bean There Discover the perfect blend of tradition and innovation"
    assert result.fallback_used is True
    assert result.confidence == 0.5


def test_image_failure_is_isolated(make_generator, cafe):
    generator = make_generator(text={"HERO_TITLE": "Bean There"}, failing_images=("hero photograph",))
    resolver = PlaceholderResolver(generator=generator)

    result = resolver.resolve("[HERO_TITLE] [HERO_IMAGE_URL] [PRODUCT_IMAGE_URL]", {}, cafe)

    assert result.replacements["HERO_IMAGE_URL"] == DEFAULT_IMAGE_URL
    assert result.replacements["PRODUCT_IMAGE_URL"].startswith("/generated-images/")
    assert len(generator.image_calls) == 2
    # image-only fallback keeps the generated confidence
    assert result.fallback_used is False
    assert result.confidence == 0.9


def test_image_tokens_never_reach_text_prompt(make_generator, cafe):
    generator = make_generator(text={"HERO_TITLE": "Bean There"})
    resolver = PlaceholderResolver(generator=generator)

    resolver.resolve("[HERO_TITLE] [HERO_IMAGE_URL] [HERO_IMAGE_ALT] [MENU_IMAGE_ALT_2]", {}, cafe)

    prompt = generator.text_calls[0]
    assert "- HERO_TITLE" in prompt
    assert "IMAGE_URL" not in prompt
    assert "IMAGE_ALT" not in prompt


def test_unknown_tokens_stay_literal(offline_resolver, cafe):
    result = offline_resolver.resolve("[HERO_TITLE] [MYSTERY_TOKEN]", {}, cafe)

    assert result.replaced_template == "Artisan Coffee Experience [MYSTERY_TOKEN]"
    assert result.remaining == ["MYSTERY_TOKEN"]


def test_invalid_json_falls_back(make_generator, cafe):
    generator = make_generator(text="Sure! Here are your replacements")
    resolver = PlaceholderResolver(generator=generator)

    result = resolver.resolve("[HERO_TITLE]", {}, cafe)

    assert result.replaced_template == "Artisan Coffee Experience"
    assert result.fallback_used is True
    assert result.confidence == 0.5


def test_non_object_json_falls_back(make_generator, cafe):
    resolver = PlaceholderResolver(generator=make_generator(text='["Bean There"]'))

    result = resolver.resolve("[HERO_TITLE]", {}, cafe)

    assert result.replaced_template == "Artisan Coffee Experience"
    assert result.fallback_used is True


def test_raising_generator_never_escapes(make_generator, cafe):
    generator = make_generator(text_error=RuntimeError("quota exceeded"), image_error=RuntimeError("down"))
    resolver = PlaceholderResolver(generator=generator)

    result = resolver.resolve("[HERO_TITLE] [HERO_IMAGE_URL]", {}, cafe)

    assert result.replaced_template == f"Artisan Coffee Experience {DEFAULT_IMAGE_URL}"
    assert result.fallback_used is True
    assert result.confidence == 0.5


def test_generated_values_are_not_rescanned(make_generator, cafe):
    generator = make_generator(text={"HERO_TITLE": "Call [CONTACT_PHONE]", "CONTACT_PHONE": "02-999"})
    resolver = PlaceholderResolver(generator=generator)

    result = resolver.resolve("[HERO_TITLE] / [CONTACT_PHONE]", {}, cafe)

    assert result.replaced_template == "Call [CONTACT_PHONE] / 02-999"


def test_cache_returns_stored_resolution(make_generator, cafe):
    generator = make_generator(text={"HERO_TITLE": "Bean There"})
    resolver = PlaceholderResolver(generator=generator)

    first = resolver.resolve("[HERO_TITLE]", {}, cafe, project_name="Bean Co")
    second = resolver.resolve("[HERO_TITLE]", {}, cafe, project_name="Bean Co")

    assert second == first
    assert len(generator.text_calls) == 1

    resolver.resolve("[HERO_TITLE]", {}, cafe, project_name="Other Co")
    assert len(generator.text_calls) == 2


def test_cache_key_uses_template_prefix(make_generator, cafe):
    generator = make_generator(text={"HERO_TITLE": "Bean There"})
    resolver = PlaceholderResolver(generator=generator)
    prefix = "[HERO_TITLE]" + "x" * 100

    first = resolver.resolve(prefix + " first tail", {}, cafe)
    second = resolver.resolve(prefix + " second tail", {}, cafe)

    assert second == first
    assert len(generator.text_calls) == 1


def test_null_cache_always_regenerates(make_generator, cafe):
    generator = make_generator(text={"HERO_TITLE": "Bean There"})
    resolver = PlaceholderResolver(generator=generator, cache=NullResolutionCache())

    resolver.resolve("[HERO_TITLE]", {}, cafe)
    resolver.resolve("[HERO_TITLE]", {}, cafe)

    assert len(generator.text_calls) == 2


def test_cached_result_is_isolated_from_caller_changes(offline_resolver, cafe):
    first = offline_resolver.resolve("[HERO_TITLE]", {}, cafe)
    first.replacements["HERO_TITLE"] = "tampered"

    with pytest.raises(FrozenInstanceError):
        first.replaced_template = "tampered"

    second = offline_resolver.resolve("[HERO_TITLE]", {}, cafe)
    assert second.replaced_template == "Artisan Coffee Experience"
    assert second.replacements == {"HERO_TITLE": "Artisan Coffee Experience"}

    second.replacements["HERO_TITLE"] = "tampered again"
    third = offline_resolver.resolve("[HERO_TITLE]", {}, cafe)
    assert third.replacements == {"HERO_TITLE": "Artisan Coffee Experience"}


def test_alt_texts_are_kept_out_of_fallback_partition(make_generator, cafe):
    generator = make_generator(text={"HERO_TITLE": "Bean There"})
    resolver = PlaceholderResolver(generator=generator)

    result = resolver.resolve("[HERO_TITLE] [HERO_IMAGE_ALT] [HERO_SUBTITLE]", {}, cafe, project_name="Bean Co")

    assert result.generated == {"HERO_TITLE": "Bean There"}
    assert result.alt_texts == {"HERO_IMAGE_ALT": "Bean Co - cafe hero banner"}
    assert set(result.fallback) == {"HERO_SUBTITLE"}
    assert set(result.replacements) == {"HERO_TITLE", "HERO_IMAGE_ALT", "HERO_SUBTITLE"}


def test_alt_only_template_skips_generation(monkeypatch, make_generator, cafe):
    def no_pool(*args, **kwargs):
        raise AssertionError("thread pool started for a template with nothing to generate")

    monkeypatch.setattr("core.resolver.ThreadPoolExecutor", no_pool)
    generator = make_generator(text={})
    resolver = PlaceholderResolver(generator=generator)

    result = resolver.resolve('<img alt="[HERO_IMAGE_ALT]"/>', {}, cafe, project_name="Bean Co")

    assert result.replaced_template == '<img alt="Bean Co - cafe hero banner"/>'
    assert result.fallback_used is False
    assert generator.text_calls == [] and generator.image_calls == []


def test_token_usage_reports_generator_totals(make_generator, offline_resolver, cafe):
    generator = make_generator(text={"HERO_TITLE": "Bean There"})
    resolver = PlaceholderResolver(generator=generator)

    resolver.resolve("[HERO_TITLE]", {}, cafe)

    assert resolver.token_usage() == {"prompt_tokens": 80, "candidates_tokens": 20, "total_tokens": 100}
    assert offline_resolver.token_usage() is None


def test_final_json_feeds_fallback(offline_resolver, cafe):
    final_json = {"hero": {"title": "Bean There"}, "project": {"name": "Bean Co"}}

    result = offline_resolver.resolve("[HERO_TITLE] [PROJECT_NAME] [HERO_IMAGE_ALT]", final_json, cafe)

    assert result.replaced_template == "Bean There Bean Co Bean Co - cafe hero banner"


def test_to_dict_shape(offline_resolver, cafe):
    payload = offline_resolver.resolve("[HERO_TITLE]", {}, cafe).to_dict()

    assert set(payload) == {"replaced_template", "replacements", "confidence", "fallback_used"}
    assert payload["replacements"] == {"HERO_TITLE": "Artisan Coffee Experience"}


def test_business_context_from_camel_case():
    ctx = BusinessContext.from_dict({
        "industry": "cafe",
        "specificNiche": "specialty coffee",
        "businessModel": "dine-in",
        "keyDifferentiators": ["single origin", "latte art"],
    })

    assert ctx.specific_niche == "specialty coffee"
    assert ctx.business_model == "dine-in"
    assert ctx.key_differentiators == ["single origin", "latte art"]


def test_resolve_many_reports_progress(offline_resolver, cafe):
    files = {"app/page.tsx": "[HERO_TITLE]", "app/layout.tsx": "<html></html>", "app/contact.tsx": "[CONTACT_PHONE]"}
    progress = []

    results = offline_resolver.resolve_many(files, {}, cafe, on_progress=lambda done, total, path: progress.append((done, total)))

    assert set(results) == set(files)
    assert results["app/page.tsx"].replaced_template == "Artisan Coffee Experience"
    assert results["app/layout.tsx"].confidence == 1.0
    assert sorted(progress) == [(1, 3), (2, 3), (3, 3)]


def test_resolve_many_isolates_failing_file(cafe):
    class FlakyResolver(PlaceholderResolver):
        def resolve(self, template, final_json, ctx, project_name=None, user_intent=None) -> ResolutionResult:
            if "BROKEN" in template:
                raise RuntimeError("boom")
            return super().resolve(template, final_json, ctx, project_name, user_intent)

    resolver = FlakyResolver(generator=None)
    results = resolver.resolve_many({"a.tsx": "[HERO_TITLE] BROKEN", "b.tsx": "[CONTACT_PHONE]"}, {}, cafe)

    assert results["a.tsx"].replaced_template == "Artisan Coffee Experience BROKEN"
    assert results["a.tsx"].fallback_used is True
    assert results["b.tsx"].replaced_template == "02-123-4567"
