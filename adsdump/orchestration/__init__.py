"""
Orchestration Layer - Workflow Coordination

This layer coordinates account discovery and the per-account dump.
- Pure workflow coordination
- Isolates per-resource and per-account failures
- Composes extract and load operations
"""
