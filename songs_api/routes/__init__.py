"""
Songs API — Routes Package
============================

Route Inventory:
    - songs.py:   GET  /songs?title=<t>   (look up one song)
                  POST /songs             (store one song)
    - health.py:  GET  /health            (store reachability)

Routes stay thin: validate, call SongService, shape the response.
"""
