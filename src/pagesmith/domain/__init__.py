"""Domain layer — content records, frontmatter, and ordering rules.

This layer depends only on stdlib, pydantic, ruamel.yaml and markdown-it-py.
It must never import from plugins, services, infrastructure, commands, or config.
"""
