"""
GhostNote Backend — API Routes Package
========================================

Route Inventory:
    - notes.py:   POST /api/save              (store a note or share copy)
                  GET  /api/list              (durable notes, newest first)
                  GET  /api/share/{public_id} (read once, then gone)
                  POST /api/delete            (idempotent delete)
    - health.py:  GET  /health                (service health check)

Routes stay thin: parse the request, call NoteService, set headers.
"""
