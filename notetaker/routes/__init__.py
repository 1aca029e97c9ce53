# Routes package init
"""
NoteTaker Backend: API Routes Package
======================================

Route Inventory:
    - notes.py:   GET  /notes              (list every note)
                  GET  /notes/{note_id}    (fetch one note by ?id=)
                  POST /notes              (create a note)
                  POST /notes/reset        (truncate the notes table)
    - health.py:  GET  /health             (service health check)

Routes are thin: extract input, call NoteService, return the result.
"""
