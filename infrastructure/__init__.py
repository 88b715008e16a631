"""Infrastructure layer for the latent chord substitution service.

Modules:
    metrics     Prometheus metrics registry.
"""
