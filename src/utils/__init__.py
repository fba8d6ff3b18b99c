"""
Utility modules for ReviewPulse.

Cross-cutting concerns:
- CSV tokenizer: Split and serialize CSV text
- Dates: Resolve raw date cells to instants
- Storage: File I/O helpers for dataset persistence
"""
