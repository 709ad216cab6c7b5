"""unigalaxy: convert raw HTML/CSS UI snippets into uni-app components.

Layers:
    unigalaxy.conversion  offline conversion pass (snippet -> ComponentRecord)
    unigalaxy.core        record schema, rule table, corpus stores
    unigalaxy.query       filter / sort / paginate / statistics
    unigalaxy.service     response dicts for MCP tools and the CLI
"""

__version__ = "0.1.0"
