"""
Application Modules.

- backend/: Note storage API, database, configuration, logging
- editor/: Debounced autosave controller and title derivation
- cli/: Command-line client and terminal editor (Typer + Rich)
"""
