"""DealerHub Core Platform Module.

Shared infrastructure used by the inventory and storage sections:
- Configuration and environment normalization
- Error taxonomy
- Firebase authentication
- Base repository over the connection pool
- Logging and API helpers
"""
