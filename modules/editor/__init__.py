"""
Editor Autosave Module.

Everything an editing surface needs to persist a note while it is being
typed: the debounced AutosaveController, the NoteStore implementations it
saves through, title derivation and the SaveStatus snapshot it exposes.

Usage:
    from modules.editor.controller import AutosaveController
    from modules.editor.store import ApiNoteStore
"""
