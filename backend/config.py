"""
Configuration settings for the Site Template Resolver
"""
import os
from dotenv import load_dotenv

load_dotenv()

# Gemini (Google Generative AI) Configuration
GEMINI_API_KEY = os.getenv('GEMINI_API_KEY')
GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-2.5-flash')
GEMINI_IMAGE_MODEL = os.getenv('GEMINI_IMAGE_MODEL', 'gemini-2.5-flash-image-preview')

# One JSON object per template, keyed by placeholder name
TEXT_GENERATION_CONFIG = {
    'max_output_tokens': int(os.getenv('TEXT_MAX_OUTPUT_TOKENS', '2000')),
    'temperature': float(os.getenv('TEXT_TEMPERATURE', '0.7')),
    'top_p': 0.9,
    'response_mime_type': 'application/json',
}

SYSTEM_INSTRUCTION = (
    "You are an expert content generator for website templates. Generate appropriate content "
    "for placeholders based on user intent and business context. Return only valid JSON with replacements."
)

# Local asset used whenever an image placeholder cannot be generated
DEFAULT_IMAGE_URL = os.getenv('DEFAULT_IMAGE_URL', '/images/placeholder.svg')

# Where generated images are written and the URL prefix they are served under
GENERATED_IMAGES_DIR = os.getenv('GENERATED_IMAGES_DIR', 'generated_images')
GENERATED_IMAGES_URL_PREFIX = os.getenv('GENERATED_IMAGES_URL_PREFIX', '/generated-images')

# Resolution pipeline
CACHE_KEY_TEMPLATE_PREFIX = 100  # chars of the template that take part in the cache key
IMAGE_MAX_WORKERS = int(os.getenv('IMAGE_MAX_WORKERS', '4'))
FILE_MAX_WORKERS = int(os.getenv('FILE_MAX_WORKERS', '4'))
DEFAULT_USER_INTENT = 'Create a professional website'
DEFAULT_PROJECT_NAME = 'Website'

# Logging configuration
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FILE = os.getenv('LOG_FILE') or None  # Console only unless a path is given
