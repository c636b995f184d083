"""VespaBridge — OpenSearch-compatible REST facade for Vespa.

Rewrites OpenSearch-dialect requests (search, count, bulk, document and index
lifecycle calls) into Vespa's document and query APIs, and reshapes the Vespa
responses back into the envelope OpenSearch clients expect.
"""

__version__ = "0.1.0"
