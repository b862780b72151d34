"""
adsdump - Meta Marketing API account dump

Discovers every ad account reachable with an access token and dumps its
account details, campaigns, ad sets, ads and insights as JSON documents.
"""

__version__ = "1.0.0"
