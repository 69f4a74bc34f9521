"""AI Infrastructure - Adapters for image embedding providers.

Adapters are imported from their own modules; the CLIP adapter needs the
optional `vision` extra.
"""
