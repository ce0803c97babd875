"""
Hot Sheet Services
==================

LLM-backed brand research for the Hot Sheet view.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""

from .hot_sheet_service import HotSheetService, parse_hot_sheet_json, sanitize_brand_name, sanitize_retailer

__all__ = [
    'HotSheetService',
    'parse_hot_sheet_json',
    'sanitize_brand_name',
    'sanitize_retailer',
]
