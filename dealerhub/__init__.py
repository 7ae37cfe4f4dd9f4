"""DealerHub: dealership back-office API (vehicle records, storefront listing, media signing)."""

__version__ = '1.0.0'
