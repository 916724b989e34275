"""
Funeral services platform: multi-tenant API for funeral homes
"""

__version__ = "1.0.0"
