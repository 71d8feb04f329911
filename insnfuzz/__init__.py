"""Template-driven instruction fuzzing: assembler source generation from template trees, and harness state and report formatting."""

__version__ = "0.1.0"