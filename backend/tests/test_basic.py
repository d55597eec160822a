"""
Basic smoke tests for the Site Template Resolver
"""
from core import BusinessContext, PlaceholderResolver, create_resolver


def test_create_resolver_without_ai():
    """Fallback-only resolver needs no API key"""
    resolver = create_resolver(use_ai=False)
    assert isinstance(resolver, PlaceholderResolver)
    assert resolver.generator is None


def test_create_resolver_without_api_key(monkeypatch):
    monkeypatch.setattr("core.resolver.GEMINI_API_KEY", None)
    resolver = create_resolver(use_ai=True)
    assert resolver.generator is None


def test_fallback_page_resolves_completely():
    """A typical landing page resolves with no tokens left"""
    template = """
import React from 'react';
export default function Home() {
  return (
    <main>
      <img src="[HERO_IMAGE_URL]" alt="[HERO_IMAGE_ALT]" />
      <h1>[HERO_TITLE]</h1>
      <p>[HERO_SUBTITLE]</p>
      <button>[MENU_BUTTON_TEXT]</button>
      <h2>[FEATURED_SECTION_TITLE]</h2>
      <div>[MENU_ITEM_1_NAME] - [MENU_ITEM_1_PRICE]</div>
      <div>[FEATURE_2_TITLE]: [FEATURE_2_DESCRIPTION]</div>
      <footer>[CONTACT_PHONE] | [CONTACT_EMAIL] | [CONTACT_HOURS]</footer>
    </main>
  );
}
"""
    resolver = create_resolver(use_ai=False)
    result = resolver.resolve(template, {}, BusinessContext(industry="restaurant"), project_name="Siam Table")

    assert result.remaining == []
    assert "Fine Dining Experience" in result.replaced_template
    assert "Signature Dish - ฿250" in result.replaced_template
    assert 'alt="Siam Table - restaurant hero banner"' in result.replaced_template
    assert result.fallback_used is True
