"""Application-wide constants for the Item Search MCP server.

This module contains the id prefixes, provenance labels and fixed messages
shared by the store, the information sources and the transports.
"""

# ========================================
# Item Id Prefixes
# ========================================

MANUAL_ID_PREFIX = "item_"  # Items saved explicitly by a client
GENERATED_ID_PREFIX = "ai_"  # Items answered directly by the LLM
WEB_ID_PREFIX = "web_"  # Items from web-oriented generation or site scraping

ORGANIZATION_SLUG_LENGTH = 10  # Characters of the organization kept in web ids

# ========================================
# Provenance Labels
# ========================================

MANUAL_SOURCE_LABEL = "Manual Save"
GENERATED_SOURCE_LABEL = "LLM Search"
WEB_SEARCH_SOURCE_SUFFIX = "(Web Search)"
WEB_EXTRACT_SOURCE_SUFFIX = "(Web Extract)"
FALLBACK_SOURCE_SUFFIX = "(Summary Info)"
UPDATED_SOURCE_SUFFIX = "(updated)"
DEFAULT_WEB_SOURCE = "Web"

# ========================================
# Fixed Messages
# ========================================

NO_INFORMATION_TEMPLATE = "# {title}\n\nNo information was found."
NOT_AVAILABLE = "No details available"
FALLBACK_CATEGORY = "Uncategorized (fallback)"
EXTRACTED_CATEGORY_DEFAULT = "Uncategorized"

# ========================================
# LLM Parameters
# ========================================

LLM_SEARCH_ITEM_COUNT = 5  # Items requested from the direct LLM search
PAGE_CONTENT_CHAR_LIMIT = 10000  # Page characters sent to the extractor
MAX_RETRIES_DEFAULT = 2  # Output validation retries for structured LLM calls

# ========================================
# Storage
# ========================================

ITEM_FILE_SUFFIX = ".json"
