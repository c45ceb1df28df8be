"""
Capability layer: registry of named actions, the static handler catalog
they dispatch to, and the generation fallback that registers new ones.

Usage:
    from fixit.capabilities.registry import CapabilityRegistry
    from fixit.capabilities.handlers import HANDLERS
"""
