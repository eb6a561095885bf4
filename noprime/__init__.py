"""
NoPrime

Offers shoppers on a retailer product page a way out: the manufacturer's
own store, an alternate retailer, a bookseller, or a web search.

Modules:
    models       - Data models (ProductInfo, StoreEntry, DetectionPayload)
    common       - Shared utilities (config loader, logging, text helpers)
    catalog      - Brand catalog data and the external link checker
    resolution   - Brand resolution and redirect URL building
    extraction   - Product metadata extraction from page markup
    messaging    - Message contract and bus between pages and coordinator
    host         - Host platform surface (storage, toolbar, tabs)
    controller   - Per-page controller and banner rendering
    coordinator  - Process-wide coordinator (enabled flag, tab state, badges)
"""

__version__ = "1.3.0"
