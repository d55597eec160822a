"""
Default Content Table

Deterministic, industry-keyed content used whenever generation is unavailable
or leaves a placeholder unfilled. Every lookup returns a non-empty string for
any industry key, including keys that are not in the table (GENERIC).
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from config import DEFAULT_IMAGE_URL, DEFAULT_PROJECT_NAME
from utils.placeholder_scanner import image_alt_parts, is_image_alt_placeholder, is_image_url_placeholder


class Industry(str, Enum):
    CAFE = 'cafe'
    RESTAURANT = 'restaurant'
    ECOMMERCE = 'ecommerce'
    PORTFOLIO = 'portfolio'
    AGENCY = 'agency'
    BLOG = 'blog'
    FASHION = 'fashion'
    TECHNOLOGY = 'technology'
    GENERIC = 'generic'

    @classmethod
    def from_key(cls, key: Optional[str]) -> 'Industry':
        """Normalize a free-form industry key; anything unknown maps to GENERIC."""
        if not key:
            return cls.GENERIC
        normalized = re.sub(r'[\s\-]+', '_', str(key).strip().lower())
        normalized = INDUSTRY_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            return cls.GENERIC


INDUSTRY_ALIASES = {
    'coffee': 'cafe',
    'coffee_shop': 'cafe',
    'coffeeshop': 'cafe',
    'café': 'cafe',
    'bakery_cafe': 'cafe',
    'food': 'restaurant',
    'dining': 'restaurant',
    'bistro': 'restaurant',
    'e_commerce': 'ecommerce',
    'online_store': 'ecommerce',
    'shop': 'ecommerce',
    'store': 'ecommerce',
    'retail': 'ecommerce',
    'creative_portfolio': 'portfolio',
    'personal': 'portfolio',
    'digital_agency': 'agency',
    'marketing_agency': 'agency',
    'blogging': 'blog',
    'magazine': 'blog',
    'clothing': 'fashion',
    'apparel': 'fashion',
    'tech': 'technology',
    'software': 'technology',
    'saas': 'technology',
    'it': 'technology',
}


@dataclass(frozen=True)
class MenuItem:
    name: str
    description: str
    price: str


@dataclass(frozen=True)
class Feature:
    title: str
    description: str


@dataclass(frozen=True)
class IndustryDefaults:
    hero_title: str
    hero_subtitle: str
    hero_description: str
    contact_hours: str
    menu_button_text: str
    order_button_text: str
    featured_title: str
    services_title: str
    menu_noun: str
    menu_items: Tuple[MenuItem, ...] = ()
    features: Tuple[Feature, ...] = ()
    product_price: str = '฿590'
    original_price: str = '฿790'
    order_status: str = 'Processing'
    contact_phone: str = '02-123-4567'
    contact_email: str = 'info@example.com'
    contact_address: str = '123 Main Street, Bangkok 10110'
    contact_button_text: str = 'Contact Us'
    learn_more_text: str = 'Learn More'
    about_title: str = 'About Us'


GENERIC_DEFAULTS = IndustryDefaults(
    hero_title='Welcome to Our Website',
    hero_subtitle='Discover what we offer',
    hero_description='Professional services and solutions',
    contact_hours='9:00 - 18:00',
    menu_button_text='Learn More',
    order_button_text='Get Started',
    featured_title='Featured Items',
    services_title='Our Services',
    menu_noun='item',
)

INDUSTRY_DEFAULTS: Dict[Industry, IndustryDefaults] = {
    Industry.CAFE: IndustryDefaults(
        hero_title='Artisan Coffee Experience',
        hero_subtitle='Discover the perfect blend of tradition and innovation',
        hero_description='We serve premium coffee in a cozy atmosphere',
        contact_hours='7:00 - 22:00',
        menu_button_text='View Menu',
        order_button_text='Order Now',
        featured_title='Featured Coffee',
        services_title='Our Services',
        menu_noun='drink',
        menu_items=(
            MenuItem('Espresso', 'Rich and bold', '฿80'),
            MenuItem('Cappuccino', 'Perfect balance', '฿120'),
            MenuItem('Latte', 'Smooth and creamy', '฿140'),
        ),
        features=(
            Feature('Fresh Beans', 'Premium coffee beans sourced daily'),
            Feature('Expert Baristas', 'Trained professionals crafting perfect cups'),
            Feature('Cozy Atmosphere', 'Comfortable space for work and relaxation'),
        ),
        product_price='฿350',
        original_price='฿420',
        order_status='Preparing your order',
    ),
    Industry.RESTAURANT: IndustryDefaults(
        hero_title='Fine Dining Experience',
        hero_subtitle='Experience culinary excellence in every dish',
        hero_description='Fresh ingredients, authentic flavors, exceptional service',
        contact_hours='11:00 - 22:00',
        menu_button_text='View Menu',
        order_button_text='Make Reservation',
        featured_title='Featured Dishes',
        services_title='Our Menu',
        menu_noun='dish',
        menu_items=(
            MenuItem('Signature Dish', 'Delicious and fresh', '฿250'),
            MenuItem('Chef Special', 'Authentic flavors', '฿350'),
            MenuItem('Popular Choice', 'Chef recommended', '฿450'),
        ),
        features=(
            Feature('Fresh Ingredients', 'Locally sourced, fresh ingredients'),
            Feature('Expert Chefs', 'Experienced chefs with passion'),
            Feature('Great Service', 'Friendly and attentive service'),
        ),
        product_price='฿350',
        original_price='฿450',
        order_status='Your table is being prepared',
    ),
    Industry.ECOMMERCE: IndustryDefaults(
        hero_title='Shop Quality Products',
        hero_subtitle='Find the best products at great prices',
        hero_description='Quality products delivered to your doorstep',
        contact_hours='24/7 Online',
        menu_button_text='Shop Now',
        order_button_text='Add to Cart',
        featured_title='Featured Products',
        services_title='Our Products',
        menu_noun='product',
        menu_items=(
            MenuItem('Product 1', 'High quality', '฿500'),
            MenuItem('Product 2', 'Great value', '฿800'),
            MenuItem('Product 3', 'Popular choice', '฿1200'),
        ),
        features=(
            Feature('Fast Delivery', 'Quick and reliable delivery service'),
            Feature('Quality Products', 'Carefully selected quality products'),
            Feature('Great Prices', 'Competitive prices for value'),
        ),
        product_price='฿890',
        original_price='฿1290',
        order_status='Order confirmed',
    ),
    Industry.PORTFOLIO: IndustryDefaults(
        hero_title='Creative Portfolio',
        hero_subtitle='Showcasing creative work and projects',
        hero_description='Creative solutions for modern challenges',
        contact_hours='9:00 - 18:00',
        menu_button_text='View Work',
        order_button_text='Get Quote',
        featured_title='Featured Work',
        services_title='Our Services',
        menu_noun='project',
        menu_items=(
            MenuItem('Project 1', 'Creative design', '฿5000'),
            MenuItem('Project 2', 'Modern approach', '฿10000'),
            MenuItem('Project 3', 'User focused', '฿15000'),
        ),
        features=(
            Feature('Creative Design', 'Creative and innovative design solutions'),
            Feature('Modern Approach', 'Modern and clean aesthetic approach'),
            Feature('User Focused', 'User-centered design philosophy'),
        ),
        product_price='฿5000',
        original_price='฿7000',
        order_status='In progress',
    ),
    Industry.AGENCY: IndustryDefaults(
        hero_title='Digital Solutions',
        hero_subtitle='Transforming ideas into digital reality',
        hero_description='Full-service digital marketing and development',
        contact_hours='9:00 - 18:00',
        menu_button_text='Our Services',
        order_button_text='Start Project',
        featured_title='Featured Services',
        services_title='Our Services',
        menu_noun='service',
        menu_items=(
            MenuItem('Service 1', 'Professional service', '฿10000'),
            MenuItem('Service 2', 'Expert solution', '฿25000'),
            MenuItem('Service 3', 'Quality work', '฿50000'),
        ),
        features=(
            Feature('Expert Team', 'Experienced and skilled team members'),
            Feature('Quality Work', 'High-quality work and attention to detail'),
            Feature('Fast Delivery', 'Fast turnaround times'),
        ),
        product_price='฿25000',
        original_price='฿30000',
        order_status='Project kickoff scheduled',
    ),
    # Blog has no menu items: MENU_ITEM_n_* falls through to the generic form
    Industry.BLOG: IndustryDefaults(
        hero_title='Thoughts & Stories',
        hero_subtitle='Sharing insights and experiences',
        hero_description='Thoughtful content on various topics',
        contact_hours='24/7 Available',
        menu_button_text='Read More',
        order_button_text='Subscribe',
        featured_title='Featured Posts',
        services_title='Categories',
        menu_noun='post',
        features=(
            Feature('Quality Content', 'Well-researched and informative content'),
            Feature('Regular Updates', 'Regular updates with fresh perspectives'),
            Feature('Engaging Stories', 'Engaging and relatable stories'),
        ),
        product_price='Free',
        original_price='Free',
        order_status='Subscribed',
    ),
    Industry.FASHION: IndustryDefaults(
        hero_title='Style & Fashion',
        hero_subtitle='Express your unique style',
        hero_description='Trendy styles for every occasion',
        contact_hours='10:00 - 20:00',
        menu_button_text='Shop Collection',
        order_button_text='Buy Now',
        featured_title='Featured Collection',
        services_title='Collections',
        menu_noun='look',
        menu_items=(
            MenuItem('Item 1', 'Trendy style', '฿800'),
            MenuItem('Item 2', 'Comfortable fit', '฿1200'),
            MenuItem('Item 3', 'Fashionable design', '฿1800'),
        ),
        features=(
            Feature('Trendy Styles', 'Latest trends and fashionable styles'),
            Feature('Quality Materials', 'High-quality materials and construction'),
            Feature('Perfect Fit', 'Perfect fit and comfort'),
        ),
        product_price='฿1200',
        original_price='฿1590',
        order_status='Order confirmed',
    ),
    Industry.TECHNOLOGY: IndustryDefaults(
        hero_title='Innovation & Technology',
        hero_subtitle='Building the future with technology',
        hero_description='Cutting-edge solutions for businesses',
        contact_hours='9:00 - 18:00',
        menu_button_text='Our Solutions',
        order_button_text='Get Started',
        featured_title='Featured Solutions',
        services_title='Our Solutions',
        menu_noun='solution',
        menu_items=(
            MenuItem('Solution 1', 'Innovative solution', '฿15000'),
            MenuItem('Solution 2', 'Reliable service', '฿30000'),
            MenuItem('Solution 3', 'Advanced technology', '฿50000'),
        ),
        features=(
            Feature('Innovation', 'Cutting-edge innovative solutions'),
            Feature('Reliability', 'Reliable and stable technology'),
            Feature('Support', 'Comprehensive support and maintenance'),
        ),
        product_price='฿15000',
        original_price='฿20000',
        order_status='Deployment in progress',
    ),
    Industry.GENERIC: GENERIC_DEFAULTS,
}


def defaults_for(industry: Optional[str]) -> IndustryDefaults:
    return INDUSTRY_DEFAULTS[Industry.from_key(industry)]


# ============================================================================
# PER-CATEGORY LOOKUPS
# ============================================================================

def menu_item_name(industry: Optional[str], index: int) -> str:
    items = defaults_for(industry).menu_items
    return items[index - 1].name if 0 < index <= len(items) else f"Item {index}"


def menu_item_description(industry: Optional[str], index: int) -> str:
    items = defaults_for(industry).menu_items
    return items[index - 1].description if 0 < index <= len(items) else f"Description for item {index}"


def menu_item_price(industry: Optional[str], index: int) -> str:
    items = defaults_for(industry).menu_items
    return items[index - 1].price if 0 < index <= len(items) else '฿100'


def feature_title(industry: Optional[str], index: int) -> str:
    features = defaults_for(industry).features
    return features[index - 1].title if 0 < index <= len(features) else f"Feature {index}"


def feature_description(industry: Optional[str], index: int) -> str:
    features = defaults_for(industry).features
    return features[index - 1].description if 0 < index <= len(features) else f"Description for feature {index}"


def coffee_price(industry: Optional[str]) -> str:
    return menu_item_price(industry, 1)


# ============================================================================
# IMAGE ALT TEXT
# ============================================================================

def _industry_label(industry: Optional[str]) -> str:
    label = (industry or '').strip().replace('_', ' ')
    return label or 'business'


def image_alt(category: str, industry: Optional[str], project_name: Optional[str], index: Optional[int] = None) -> str:
    """Alt text for an image category (HERO, MENU, COFFEE, ...), built from industry and project name."""
    name = project_name or DEFAULT_PROJECT_NAME
    label = _industry_label(industry)
    suffix = f" {index}" if index else ''
    builders = {
        'HERO': lambda: f"{name} - {label} hero banner",
        'MENU': lambda: f"{name} signature {defaults_for(industry).menu_noun}{suffix}",
        'COFFEE': lambda: f"Freshly brewed coffee at {name}",
        'PRODUCT': lambda: f"{name} featured product{suffix}",
        'SERVICE': lambda: f"{name} {label} services",
        'TEAM': lambda: f"The {name} team",
        'GALLERY': lambda: f"{name} gallery{suffix}",
    }
    builder = builders.get(category)
    if builder is None:
        return f"{name} {category.lower().replace('_', ' ')} image{suffix}"
    return builder()


def image_alt_for_placeholder(placeholder: str, industry: Optional[str], project_name: Optional[str]) -> str:
    category, index = image_alt_parts(placeholder)
    return image_alt(category, industry, project_name, index)


# ============================================================================
# PLACEHOLDER DISPATCH
# ============================================================================

MENU_ITEM_PATTERN = re.compile(r'^MENU_ITEM_(\d+)_(NAME|DESCRIPTION|PRICE)$')
FEATURE_PATTERN = re.compile(r'^FEATURE_(\d+)_(TITLE|DESCRIPTION)$')

# placeholder -> (finalJson section, key, IndustryDefaults attribute)
SECTION_FIELDS = {
    'HERO_TITLE': ('hero', 'title', 'hero_title'),
    'HERO_SUBTITLE': ('hero', 'subtitle', 'hero_subtitle'),
    'HERO_DESCRIPTION': ('hero', 'description', 'hero_description'),
    'CONTACT_PHONE': ('contact', 'phone', 'contact_phone'),
    'CONTACT_EMAIL': ('contact', 'email', 'contact_email'),
    'CONTACT_ADDRESS': ('contact', 'address', 'contact_address'),
    'CONTACT_HOURS': ('contact', 'hours', 'contact_hours'),
    'FEATURED_SECTION_TITLE': ('featured', 'title', 'featured_title'),
}

STATIC_FIELDS = {
    'MENU_BUTTON_TEXT': 'menu_button_text',
    'ORDER_BUTTON_TEXT': 'order_button_text',
    'CONTACT_BUTTON_TEXT': 'contact_button_text',
    'LEARN_MORE_TEXT': 'learn_more_text',
    'ABOUT_SECTION_TITLE': 'about_title',
    'SERVICES_SECTION_TITLE': 'services_title',
    'PRODUCT_PRICE': 'product_price',
    'ORIGINAL_PRICE': 'original_price',
    'ORDER_STATUS': 'order_status',
}


def _section(final_json: Optional[Dict[str, Any]], key: str) -> Dict[str, Any]:
    value = (final_json or {}).get(key)
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _menu_item_from_json(final_json: Optional[Dict[str, Any]], index: int, key: str) -> Optional[str]:
    items = _section(final_json, 'menu').get('items')
    if not isinstance(items, list) or not 0 < index <= len(items):
        return None
    item = items[index - 1]
    return _text(item.get(key)) if isinstance(item, dict) else None


def resolve_project_name(project_name: Optional[str], final_json: Optional[Dict[str, Any]]) -> str:
    return project_name or _text(_section(final_json, 'project').get('name')) or DEFAULT_PROJECT_NAME


def default_value(placeholder: str,
                  industry: Optional[str],
                  final_json: Optional[Dict[str, Any]] = None,
                  project_name: Optional[str] = None) -> Optional[str]:
    """Fallback value for a placeholder name, or None when the category is unknown.

    Values present in finalJson win over the static table.
    """
    defaults = defaults_for(industry)
    project = _section(final_json, 'project')
    business = _section(final_json, 'business')

    if placeholder == 'PROJECT_NAME':
        return resolve_project_name(project_name, final_json)
    if placeholder == 'BUSINESS_NAME':
        return _text(business.get('name')) or _text(project.get('name')) or _text(industry) or 'Business'
    if placeholder == 'BUSINESS_TYPE':
        return _text(industry) or 'Business'
    if placeholder == 'BUSINESS_DESCRIPTION':
        return _text(business.get('description')) or _text(project.get('description')) or 'Professional website'

    if placeholder in SECTION_FIELDS:
        section, key, attr = SECTION_FIELDS[placeholder]
        return _text(_section(final_json, section).get(key)) or getattr(defaults, attr)

    if placeholder in STATIC_FIELDS:
        return getattr(defaults, STATIC_FIELDS[placeholder])

    if placeholder == 'COFFEE_PRICE':
        return _menu_item_from_json(final_json, 1, 'price') or coffee_price(industry)

    match = MENU_ITEM_PATTERN.match(placeholder)
    if match:
        index, part = int(match.group(1)), match.group(2)
        if index < 1:
            return None
        from_json = _menu_item_from_json(final_json, index, part.lower())
        if from_json:
            return from_json
        if part == 'NAME':
            return menu_item_name(industry, index)
        if part == 'DESCRIPTION':
            return menu_item_description(industry, index)
        return menu_item_price(industry, index)

    match = FEATURE_PATTERN.match(placeholder)
    if match:
        index, part = int(match.group(1)), match.group(2)
        if index < 1:
            return None
        if part == 'TITLE':
            return feature_title(industry, index)
        return feature_description(industry, index)

    if is_image_url_placeholder(placeholder):
        return DEFAULT_IMAGE_URL

    if is_image_alt_placeholder(placeholder):
        return image_alt_for_placeholder(placeholder, industry, resolve_project_name(project_name, final_json))

    return None
