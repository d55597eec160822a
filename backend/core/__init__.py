"""
Site Template Resolver Core Module
"""
from .generator import ContentGenerator
from .resolver import BusinessContext, PlaceholderResolver, ResolutionResult, create_resolver

__all__ = ['ContentGenerator', 'BusinessContext', 'PlaceholderResolver', 'ResolutionResult', 'create_resolver']
