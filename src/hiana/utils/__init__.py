"""Utility functions and tools used across the hiana package.

**Core Utilities:**
- `config`: Configuration file parsing (YAML, includes, overrides)
- `factory`: Instantiate classes from configuration blocks
- `logger`: Package logger
- `globals`: Physical constants and detector-wide definitions
- `enums`: Enumerated types which can be parsed from configuration strings
- `stopwatch`: Performance timing utilities

**Physics:**
- `pid`: TPC dE/dx and TOF based particle identification helpers
- `flow`: Event-plane and Q-vector helpers for anisotropic flow analyses
"""
