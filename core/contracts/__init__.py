"""core.contracts

Stable interfaces (ABCs) shared between the engine and its embedding host.

- settings: namespaced key-value persistence
- host: plugin enumeration for auto-discovery
"""
