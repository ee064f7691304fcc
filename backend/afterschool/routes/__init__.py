# Routes package init
"""
After School Lessons Backend — API Routes Package
===================================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one resource.

Route Inventory:
    - index.py:    GET  /                    (service metadata + endpoint list)
    - lessons.py:  GET  /lessons             (all lessons)
                   GET  /search?q=           (substring search)
                   PUT  /lessons/{id}        (set remaining spaces)
    - orders.py:   POST /order               (create a booking)
    - images.py:   GET  /images/{file}       (lesson artwork)
    - health.py:   GET  /health              (database probe)

Design Principle:
    Routes are THIN: decode the body into a command object, call the
    repository, shape the response. Failures are raised as exceptions and
    turned into JSON errors by the handlers registered in main.py.
"""
