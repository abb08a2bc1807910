"""
GhostNote Backend — Services Layer

    - NoteService: save/list/share-read/delete rules over the `notes` table
"""
