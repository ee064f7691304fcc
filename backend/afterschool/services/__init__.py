# Services package init
"""
After School Lessons Backend — Offline Services
=================================================

What:  One-shot utilities that run outside the request path.

Service Inventory:
    - seed_service:    reset the lessons collection from lessons.json
    - artwork_service: write SVG illustrations served under /images

Both are driven by the console commands in afterschool.cli.
"""
