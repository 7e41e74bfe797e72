"""
AI Readiness

Sitemap discovery and llms.txt generation for websites.
"""

__all__ = [
    "__version__",
    "config",
    "filters",
    "generator",
    "locator",
    "pipeline",
    "sitemap",
    "web",
]

__version__ = "0.1.0"
