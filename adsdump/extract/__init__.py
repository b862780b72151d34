"""
Extract Layer - Pure I/O to the Graph API

This layer handles all external data fetching with no orchestration logic.
- No imports from load or orchestration layers
- Returns raw bytes or accumulated records
- Handles rate limiting, retries, pagination and error classification
"""
