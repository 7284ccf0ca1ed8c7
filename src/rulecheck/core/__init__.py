"""Core infrastructure shared by the governance checks and the CLI.

Modules:
    - config: Application settings (pydantic-settings)
    - console: Rich console and logging setup
    - registry: Explicit command registry
    - result: Ok/Err results and the error hierarchy
"""
