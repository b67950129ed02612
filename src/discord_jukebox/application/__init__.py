"""
Application Layer

Orchestrates domain objects and infrastructure ports to fulfill use cases.

Structure:
- commands/: Text command parsing, help topics and dispatch
- services/: Guild players, the guild registry and track resolution
- interfaces/: Port interfaces for infrastructure adapters
"""
