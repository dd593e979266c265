"""
Persistence adapters.

These modules encapsulate how data is stored/retrieved (today a single JSON
document). Services depend on the Repository operations rather than touching
the JSON file.
"""
