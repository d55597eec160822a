"""
Site Template Resolver - Main Entry Point
Fill [PLACEHOLDER] tokens in a website template with AI-generated or default content
"""
import argparse
import json
import sys

from config import LOG_LEVEL, LOG_FILE, DEFAULT_USER_INTENT
from utils.logger import get_logger
from utils.placeholder_scanner import validate_template
from core import BusinessContext, create_resolver


def main():
    parser = argparse.ArgumentParser(
        description="Fill [PLACEHOLDER] tokens in website templates with AI-generated or default content",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Resolve a page template for a cafe, printing the result
  python main.py --template app/page.tsx --industry cafe --project-name "Bean There"

  # Use business data gathered in the chat flow
  python main.py --template app/page.tsx --industry restaurant --final-json final.json --output out/page.tsx

  # Offline, default content only
  python main.py --template app/page.tsx --industry ecommerce --fallback
        """
    )

    # Required arguments
    parser.add_argument('--template', '-t', type=str, required=True, help='Path to the template file')

    # Business context arguments
    parser.add_argument('--industry', type=str, default='', help='Industry key (cafe, restaurant, ecommerce, ...)')
    parser.add_argument('--final-json', type=str, help='Path to a JSON file with gathered business data')
    parser.add_argument('--project-name', type=str, help='Project or business name')
    parser.add_argument('--user-intent', type=str, default=DEFAULT_USER_INTENT, help='What the site should achieve')
    parser.add_argument('--niche', type=str, default='', help='Specific niche within the industry')
    parser.add_argument('--business-model', type=str, default='', help='Business model description')
    parser.add_argument('--differentiator', action='append', default=[], help='Key differentiator (repeatable)')

    # Mode arguments
    parser.add_argument('--fallback', action='store_true', help='Use fallback content (no AI)')
    parser.add_argument('--validate', action='store_true', help='Validate the resolved template and print the report')

    # Output arguments
    parser.add_argument('--output', '-o', type=str, help='Write the resolved template here instead of stdout')

    # Logging arguments
    parser.add_argument('--log-level', type=str, default=LOG_LEVEL, help='Logging level (DEBUG, INFO, WARNING, ERROR)')
    parser.add_argument('--log-file', type=str, default=LOG_FILE, help='Log file path')

    args = parser.parse_args()

    logger = get_logger("app", args.log_level, args.log_file)

    try:
        with open(args.template, 'r', encoding='utf-8') as f:
            template = f.read()
    except OSError as e:
        logger.error(f"Could not read template {args.template}: {e}")
        return 1

    final_json = {}
    if args.final_json:
        try:
            with open(args.final_json, 'r', encoding='utf-8') as f:
                final_json = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not load business data from {args.final_json}: {e}")
            return 1
        if not isinstance(final_json, dict):
            logger.error(f"Business data in {args.final_json} must be a JSON object")
            return 1

    ctx = BusinessContext(
        industry=args.industry,
        specific_niche=args.niche,
        business_model=args.business_model,
        key_differentiators=args.differentiator,
    )

    resolver = create_resolver(use_ai=not args.fallback)
    result = resolver.resolve(template, final_json, ctx,
                              project_name=args.project_name,
                              user_intent=args.user_intent)

    if result.fallback_used:
        logger.warning(f"Fallback content used (confidence {result.confidence})")
    else:
        logger.info(f"✅ Resolved {len(result.replacements)} placeholders (confidence {result.confidence})")

    token_usage = resolver.token_usage()
    if token_usage:
        logger.info(f"📊 Token usage: {token_usage}")

    if args.output:
        try:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(result.replaced_template)
        except OSError as e:
            logger.error(f"Could not write {args.output}: {e}")
            return 1
        logger.info(f"Resolved template written to: {args.output}")
    else:
        sys.stdout.write(result.replaced_template)

    if args.validate:
        report = validate_template(result.replaced_template)
        print(json.dumps(report, indent=2), file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
