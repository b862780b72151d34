"""
Load Layer - Output Sink

This layer renders fetched documents to the console and, when an output
directory is configured, persists them as JSON files.
- No knowledge of how a document was fetched
- Never raises for a successfully fetched document
"""
